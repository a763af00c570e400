# Generated manually for the expenses app

import uuid
from decimal import Decimal
from django.conf import settings
import django.core.validators
from django.db import migrations, models
import django.db.models.deletion
import django.utils.timezone

CURRENCY_CHOICES = [
    ('CLP', 'Chilean Peso'),
    ('JPY', 'Japanese Yen'),
    ('USD', 'US Dollar'),
    ('EUR', 'Euro'),
    ('GBP', 'Pound Sterling'),
    ('KRW', 'South Korean Won'),
    ('CNY', 'Chinese Yuan'),
    ('THB', 'Thai Baht'),
]


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('trips', '0001_initial'),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Expense',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('description', models.CharField(max_length=500)),
                ('amount', models.DecimalField(decimal_places=2, max_digits=14, validators=[django.core.validators.MinValueValidator(Decimal('0.01'))])),
                ('currency', models.CharField(choices=CURRENCY_CHOICES, default='CLP', max_length=3)),
                ('expense_date', models.DateField(default=django.utils.timezone.localdate)),
                ('split_type', models.CharField(choices=[('EQUAL', 'Equal')], default='EQUAL', max_length=10)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('created_by', models.ForeignKey(null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='created_expenses', to=settings.AUTH_USER_MODEL)),
                ('paid_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.RESTRICT, related_name='paid_expenses', to='trips.tripparticipant')),
                ('trip', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='expenses', to='trips.trip')),
            ],
            options={
                'db_table': 'expenses',
                'ordering': ['-expense_date', '-created_at'],
                'indexes': [
                    models.Index(fields=['trip', 'currency'], name='expenses_trip_currency_idx'),
                    models.Index(fields=['trip', 'expense_date'], name='expenses_trip_date_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='ExpenseShare',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('amount', models.DecimalField(decimal_places=2, max_digits=14)),
                ('expense', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='shares', to='expenses.expense')),
                ('participant', models.ForeignKey(on_delete=django.db.models.deletion.RESTRICT, related_name='expense_shares', to='trips.tripparticipant')),
            ],
            options={
                'db_table': 'expense_shares',
                'unique_together': {('expense', 'participant')},
            },
        ),
        migrations.CreateModel(
            name='Payment',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('amount', models.DecimalField(decimal_places=2, max_digits=14, validators=[django.core.validators.MinValueValidator(Decimal('0.01'))])),
                ('currency', models.CharField(choices=CURRENCY_CHOICES, default='CLP', max_length=3)),
                ('paid_at', models.DateTimeField(default=django.utils.timezone.now)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('created_by', models.ForeignKey(null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='recorded_payments', to=settings.AUTH_USER_MODEL)),
                ('from_participant', models.ForeignKey(on_delete=django.db.models.deletion.RESTRICT, related_name='payments_sent', to='trips.tripparticipant')),
                ('to_participant', models.ForeignKey(on_delete=django.db.models.deletion.RESTRICT, related_name='payments_received', to='trips.tripparticipant')),
                ('trip', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='payments', to='trips.trip')),
            ],
            options={
                'db_table': 'payments',
                'ordering': ['-paid_at'],
                'indexes': [models.Index(fields=['trip', 'currency'], name='payments_trip_currency_idx')],
            },
        ),
    ]
