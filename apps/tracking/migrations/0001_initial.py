# Initial schema for surveyor directory and location tracks

from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
    ]

    operations = [
        migrations.CreateModel(
            name='Surveyor',
            fields=[
                ('id', models.CharField(max_length=100, primary_key=True, serialize=False)),
                ('name', models.CharField(blank=True, default='', max_length=200)),
                ('username', models.CharField(max_length=150, unique=True)),
                ('password', models.CharField(blank=True, default='', max_length=255)),
                ('city', models.CharField(blank=True, db_index=True, default='', max_length=100)),
                ('project_name', models.CharField(blank=True, db_index=True, default='', max_length=200)),
                ('last_activity_timestamp', models.DateTimeField(blank=True, help_text='Last ingestion or login, persisted fallback for online status', null=True)),
            ],
            options={
                'db_table': 'surveyor',
                'ordering': ['id'],
            },
        ),
        migrations.CreateModel(
            name='LocationTrack',
            fields=[
                ('id', models.BigAutoField(primary_key=True, serialize=False)),
                ('surveyor_id', models.CharField(db_index=True, max_length=100)),
                ('latitude', models.FloatField()),
                ('longitude', models.FloatField()),
                ('timestamp', models.DateTimeField(db_index=True)),
                ('geometry', models.TextField(blank=True, help_text='WKT geometry (reserved)', null=True)),
            ],
            options={
                'db_table': 'location_track',
                'ordering': ['timestamp', 'id'],
            },
        ),
        migrations.AddIndex(
            model_name='locationtrack',
            index=models.Index(fields=['surveyor_id', 'timestamp'], name='location_tr_surveyo_ts_idx'),
        ),
    ]
