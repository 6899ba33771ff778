"""
Uniform service result.

Every service call returns a Result instead of raising, and views turn a
failed Result into a JSON error for the client.
"""

from dataclasses import dataclass, field


@dataclass
class Result:
    success: bool
    data: dict = field(default_factory=dict)
    error: str = ''
    code: str = ''

    @classmethod
    def ok(cls, **data):
        return cls(success=True, data=data)

    @classmethod
    def fail(cls, error, code=''):
        return cls(success=False, error=str(error), code=code)

    def __bool__(self):
        return self.success

    def as_dict(self):
        if self.success:
            return {'success': True, **self.data}
        payload = {'success': False, 'error': self.error}
        if self.code:
            payload['code'] = self.code
        return payload
