"""
Management command to seed the daily question catalogue.

Questions are matched by month and day, so one seeded year keeps cycling.

Usage:
    python manage.py seed_prompts
    python manage.py seed_prompts --clear  # Clear existing questions first
    python manage.py seed_prompts --start 2025-02-14
"""

from datetime import date, timedelta
from django.core.management.base import BaseCommand, CommandError
from core.models import Prompt


QUESTIONS = [
    "What nice thing did your partner do for you today?",
    "What's one small thing I did recently that made you smile?",
    "Describe your perfect lazy Sunday with me.",
    "What's a song that reminds you of us?",
    "What moment made you realize we were going to work?",
    "What's your favorite inside joke of ours and how did it start?",
    "Where would we go on a spontaneous road trip right now?",
    "What's a tradition you'd like us to start?",
    "What's somewhere you've always wanted to travel together?",
    "What are you most grateful for in our relationship this week?",
    "What's a childhood memory you haven't told me yet?",
    "What made you laugh out loud this week?",
    "What comfort food should we cook together this week?",
    "What's one goal I could support you with better?",
    "If we could live anywhere in the world, where would it be?",
    "What does \"home\" mean to you?",
    "What was your first impression of me?",
    "Which photo of us is your favorite and why?",
    "What's something you're looking forward to this month?",
    "What would our perfect date night look like?",
    "What is a fear you'd like us to overcome together?",
    "Which of my habits secretly makes you happy?",
    "What's the best gift you've ever received from me?",
    "What should we learn together next?",
    "Describe our relationship in three words.",
    "What's a small ritual of ours you never want to lose?",
    "When did you feel most loved by me?",
    "What would you like us to do more often?",
    "What's a dream you haven't told anyone about?",
    "What do you want us to remember about this year?",
]


class Command(BaseCommand):
    help = 'Seeds the database with daily questions, one per day'

    def add_arguments(self, parser):
        parser.add_argument(
            '--clear',
            action='store_true',
            help='Clear all existing questions before seeding',
        )
        parser.add_argument(
            '--start',
            help='First date to seed (YYYY-MM-DD, default: today)',
        )

    def handle(self, *args, **options):
        if options['clear']:
            deleted_count = Prompt.objects.all().delete()[0]
            self.stdout.write(self.style.WARNING(f'Deleted {deleted_count} existing questions'))

        try:
            start = date.fromisoformat(options['start']) if options['start'] else date.today()
        except ValueError:
            raise CommandError(f"Invalid --start date: {options['start']}")

        created_count = 0
        for i, text in enumerate(QUESTIONS):
            prompt, created = Prompt.objects.get_or_create(
                active_date=start + timedelta(days=i),
                defaults={'text': text},
            )
            if created:
                created_count += 1

        self.stdout.write(self.style.SUCCESS(
            f'Successfully seeded {created_count} new questions (total: {Prompt.objects.count()})'
        ))
