"""
Settings used by the pytest suite.

Runs against an in-memory SQLite database with a throwaway Cloudinary
account; uploads are patched in the tests themselves.
"""

import cloudinary

from .settings import *  # noqa: F401,F403

DEBUG = False
SECURE_SSL_REDIRECT = False
SESSION_COOKIE_SECURE = False
CSRF_COOKIE_SECURE = False

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': ':memory:',
    }
}

STORAGES = {
    'default': {'BACKEND': 'django.core.files.storage.InMemoryStorage'},
    'staticfiles': {'BACKEND': 'django.contrib.staticfiles.storage.StaticFilesStorage'},
}

PASSWORD_HASHERS = ['django.contrib.auth.hashers.MD5PasswordHasher']

cloudinary.config(
    cloud_name='lovesync-test',
    api_key='000000000000000',
    api_secret='test-secret',
    secure=True,
)
