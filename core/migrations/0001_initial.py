from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion
import django.utils.timezone
import cloudinary.models


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Couple',
            fields=[
                ('id', models.CharField(max_length=100, primary_key=True, serialize=False)),
                ('status', models.CharField(choices=[('active', 'Active')], default='active', max_length=20)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('user1', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='couple_as_user1', to=settings.AUTH_USER_MODEL)),
                ('user2', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='couple_as_user2', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name': 'Couple',
                'verbose_name_plural': 'Couples',
            },
        ),
        migrations.CreateModel(
            name='Prompt',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('text', models.CharField(help_text='The question shown to both partners', max_length=500)),
                ('active_date', models.DateField(db_index=True, help_text='The specific date this question is shown (MM-DD used for cycling)', unique=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'verbose_name': 'Prompt',
                'verbose_name_plural': 'Prompts',
                'ordering': ['active_date'],
            },
        ),
        migrations.CreateModel(
            name='Profile',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('display_name', models.CharField(blank=True, help_text='Name shown to your partner (defaults to email)', max_length=50)),
                ('avatar', cloudinary.models.CloudinaryField(blank=True, help_text='Profile photo', max_length=255, null=True, verbose_name='avatar')),
                ('relationship_start', models.DateField(blank=True, help_text='When did your relationship start?', null=True)),
                ('invite_code', models.CharField(blank=True, help_text='Share this code with your partner to connect', max_length=20, null=True, unique=True)),
                ('invite_code_generated_at', models.DateTimeField(blank=True, null=True)),
                ('couple', models.ForeignKey(blank=True, help_text='The shared pair record', null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='profiles', to='core.couple')),
                ('partner', models.ForeignKey(blank=True, help_text='The connected partner', null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to=settings.AUTH_USER_MODEL)),
                ('user', models.OneToOneField(on_delete=django.db.models.deletion.CASCADE, related_name='profile', to=settings.AUTH_USER_MODEL)),
            ],
        ),
        migrations.CreateModel(
            name='Answer',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('question', models.CharField(max_length=500)),
                ('answer', models.TextField()),
                ('date', models.DateTimeField(db_index=True, default=django.utils.timezone.now)),
                ('couple', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='answers', to='core.couple')),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='answers', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'ordering': ['-date'],
            },
        ),
        migrations.CreateModel(
            name='Wish',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('text', models.CharField(max_length=500)),
                ('is_personal', models.BooleanField(default=True)),
                ('is_completed', models.BooleanField(default=False)),
                ('created_at', models.DateTimeField(default=django.utils.timezone.now)),
                ('completed_at', models.DateTimeField(blank=True, null=True)),
                ('author', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='wishes', to=settings.AUTH_USER_MODEL)),
                ('couple', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.CASCADE, related_name='wishes', to='core.couple')),
            ],
            options={
                'verbose_name_plural': 'Wishes',
            },
        ),
        migrations.CreateModel(
            name='Event',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('title', models.CharField(max_length=200)),
                ('date', models.DateTimeField(db_index=True)),
                ('description', models.TextField(blank=True, default='')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('couple', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='events', to='core.couple')),
                ('created_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='created_events', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'ordering': ['date'],
            },
        ),
        migrations.CreateModel(
            name='Memory',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('photo', cloudinary.models.CloudinaryField(max_length=255, verbose_name='photo')),
                ('date', models.DateField(default=django.utils.timezone.localdate)),
                ('description', models.TextField(blank=True, default='')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('author', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='memories', to=settings.AUTH_USER_MODEL)),
                ('couple', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='memories', to='core.couple')),
            ],
            options={
                'verbose_name_plural': 'Memories',
                'ordering': ['-date', '-created_at'],
            },
        ),
        migrations.CreateModel(
            name='PhotoOfDay',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('photo', cloudinary.models.CloudinaryField(max_length=255, verbose_name='photo')),
                ('created_at', models.DateTimeField(db_index=True, default=django.utils.timezone.now)),
                ('couple', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='photos_of_day', to='core.couple')),
                ('uploaded_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name': 'Photo of the day',
                'verbose_name_plural': 'Photos of the day',
                'ordering': ['-created_at'],
            },
        ),
        migrations.AddIndex(
            model_name='answer',
            index=models.Index(fields=['couple', 'date'], name='answer_couple_date_idx'),
        ),
        migrations.AddIndex(
            model_name='wish',
            index=models.Index(fields=['author', 'is_personal'], name='wish_author_personal_idx'),
        ),
        migrations.AddIndex(
            model_name='wish',
            index=models.Index(fields=['couple', 'is_personal'], name='wish_couple_personal_idx'),
        ),
    ]
