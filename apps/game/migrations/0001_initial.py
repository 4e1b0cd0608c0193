# Generated manually for initial setup
from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='GameRecord',
            fields=[
                ('key', models.CharField(max_length=200, primary_key=True, serialize=False)),
                ('data', models.JSONField(default=dict)),
                ('version', models.PositiveIntegerField(default=1)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'db_table': 'game_records',
                'ordering': ['key'],
            },
        ),
    ]
