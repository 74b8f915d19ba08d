import django.core.validators
import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='Room',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('room_code', models.CharField(max_length=16, unique=True)),
                ('title', models.CharField(default='Quiz', max_length=255)),
                ('prize', models.CharField(blank=True, default='Prize', max_length=255)),
                ('start_time', models.DateTimeField(blank=True, null=True)),
                ('duration_minutes', models.PositiveIntegerField(default=5, validators=[django.core.validators.MinValueValidator(1)])),
                ('max_participants', models.PositiveIntegerField(default=10, validators=[django.core.validators.MinValueValidator(1)])),
                ('redirect_link', models.URLField(default='https://example.com', max_length=500)),
                ('is_active', models.BooleanField(default=False)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'ordering': ['-created_at', '-id'],
                'constraints': [
                    models.CheckConstraint(condition=models.Q(('max_participants__gte', 1)), name='ck_room_max_participants_positive'),
                ],
            },
        ),
        migrations.CreateModel(
            name='Question',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('question_text', models.TextField()),
                ('correct_answer', models.CharField(max_length=500)),
                ('hint', models.TextField(blank=True, default='')),
                ('order_index', models.PositiveIntegerField(default=0)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('room', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='questions', to='quiz_app.room')),
            ],
            options={
                'ordering': ['order_index'],
                'constraints': [
                    models.UniqueConstraint(fields=('room', 'order_index'), name='uq_question_room_order_index'),
                ],
            },
        ),
        migrations.CreateModel(
            name='Participant',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('session_id', models.CharField(db_index=True, max_length=255)),
                ('visitor_id', models.CharField(blank=True, default='', max_length=255)),
                ('joined_at', models.DateTimeField(auto_now_add=True)),
                ('completed_at', models.DateTimeField(blank=True, null=True)),
                ('room', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='participants', to='quiz_app.room')),
            ],
            options={
                'ordering': ['-joined_at', '-id'],
                'constraints': [
                    models.UniqueConstraint(fields=('room', 'session_id'), name='uq_participant_room_session'),
                ],
            },
        ),
    ]
