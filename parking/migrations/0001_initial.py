import django.core.validators
from django.db import migrations, models
import django.db.models.deletion
import django.utils.timezone


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='ParkingSpot',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('spot_number', models.CharField(max_length=50, unique=True)),
                ('name', models.CharField(max_length=200)),
                ('address', models.CharField(max_length=500)),
                ('latitude', models.FloatField(blank=True, null=True, validators=[django.core.validators.MinValueValidator(-90), django.core.validators.MaxValueValidator(90)])),
                ('longitude', models.FloatField(blank=True, null=True, validators=[django.core.validators.MinValueValidator(-180), django.core.validators.MaxValueValidator(180)])),
                ('is_available', models.BooleanField(db_index=True, default=True)),
                ('price_per_hour', models.DecimalField(decimal_places=2, max_digits=10, validators=[django.core.validators.MinValueValidator(0)])),
                ('difficulty_level', models.CharField(choices=[('Easy', 'Easy'), ('Medium', 'Medium'), ('Hard', 'Hard')], default='Easy', max_length=10)),
                ('difficulty_reasons', models.JSONField(blank=True, default=list)),
                ('difficulty_notes', models.TextField(blank=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'ordering': ['-created_at'],
            },
        ),
        migrations.CreateModel(
            name='Slot',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('slot_number', models.CharField(max_length=50)),
                ('status', models.CharField(choices=[('empty', 'Empty'), ('occupied', 'Occupied'), ('reserved', 'Reserved')], db_index=True, default='empty', max_length=10)),
                ('last_updated', models.DateTimeField(default=django.utils.timezone.now)),
                ('floor', models.CharField(default='Ground', max_length=50)),
                ('slot_type', models.CharField(choices=[('regular', 'Regular'), ('compact', 'Compact'), ('large', 'Large'), ('handicap', 'Handicap'), ('electric', 'Electric')], default='regular', max_length=20)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('parking_spot', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='slots', to='parking.parkingspot')),
            ],
            options={
                'ordering': ['parking_spot', 'floor', 'slot_number'],
                'indexes': [models.Index(fields=['parking_spot', 'status'], name='slot_spot_status_idx')],
                'unique_together': {('parking_spot', 'slot_number')},
            },
        ),
    ]
