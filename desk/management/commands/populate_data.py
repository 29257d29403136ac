"""
Management command to populate the database with demo data.

Patients, a service price list and bills are created through the same
services the API uses, so bill numbers and line items follow the normal
rules.
"""
import random
from datetime import timedelta
from decimal import Decimal

from django.core.management.base import BaseCommand
from django.db import transaction
from django.utils import timezone

from desk.models import Bill, BillItem, Patient, ServiceItem
from desk.services.bills import create_bill
from desk.services.catalog import create_service_item
from desk.services.money import line_amount
from desk.services.patients import create_patient

FIRST_NAMES = ['Asha', 'Rahul', 'Priya', 'Vikram', 'Meera', 'Arjun', 'Kavya', 'Rohan', 'Sneha', 'Imran']
LAST_NAMES = ['Verma', 'Singh', 'Sharma', 'Iyer', 'Khan', 'Reddy', 'Nair', 'Gupta', 'Das', 'Patel']
BLOOD_GROUPS = ['A+', 'A-', 'B+', 'B-', 'O+', 'O-', 'AB+', 'AB-']

SERVICES = [
    ('Consultation', 'General physician consultation', '500.00', 'OPD'),
    ('Specialist Consultation', 'Consultation with a specialist', '900.00', 'OPD'),
    ('Complete Blood Count', 'CBC lab test', '350.00', 'Laboratory'),
    ('Lipid Profile', 'Cholesterol and triglycerides', '650.00', 'Laboratory'),
    ('Chest X-Ray', 'Single view', '800.00', 'Radiology'),
    ('ECG', 'Resting 12-lead ECG', '300.00', 'Cardiology'),
    ('Dressing', 'Minor wound dressing', '150.00', 'Procedures'),
    ('General Ward (per day)', 'Bed charges', '1500.00', 'Inpatient'),
]


class Command(BaseCommand):
    help = 'Populate database with demo patients, service items and bills'

    def add_arguments(self, parser):
        parser.add_argument('--patients', type=int, default=10)
        parser.add_argument('--bills', type=int, default=20)
        parser.add_argument('--reset', action='store_true', help='Delete existing front-office data first')
        parser.add_argument('--seed', type=int, default=None)

    def handle(self, *args, **options):
        rng = random.Random(options['seed'])
        if options['reset']:
            self.reset()

        services = self.create_service_items()
        patients = self.create_patients(rng, options['patients'])
        bills = self.create_bills(rng, patients, services, options['bills'])

        self.stdout.write(self.style.SUCCESS(
            f'Created {len(patients)} patients, {len(services)} service items and {len(bills)} bills.'
        ))

    @transaction.atomic
    def reset(self):
        BillItem.objects.all().delete()
        Bill.objects.all().delete()
        Patient.objects.all().delete()
        ServiceItem.objects.all().delete()
        self.stdout.write('Existing data removed.')

    def create_service_items(self):
        items = []
        for name, description, price, category in SERVICES:
            existing = ServiceItem.objects.filter(name=name).first()
            items.append(existing or create_service_item({
                'name': name, 'description': description, 'price': Decimal(price), 'category': category,
            }))
        return items

    def create_patients(self, rng, count):
        patients = []
        for _ in range(count):
            first, last = rng.choice(FIRST_NAMES), rng.choice(LAST_NAMES)
            patients.append(create_patient({
                'first_name': first,
                'last_name': last,
                'age': rng.randint(1, 90),
                'gender': rng.choice(['male', 'female', 'other']),
                'phone': '9' + ''.join(str(rng.randint(0, 9)) for _ in range(9)),
                'email': f'{first}.{last}{rng.randint(1, 99)}@example.com'.lower(),
                'blood_group': rng.choice(BLOOD_GROUPS),
            }))
        return patients

    def create_bills(self, rng, patients, services, count):
        if not patients:
            return []
        now = timezone.now()
        bills = []
        for _ in range(count):
            lines = []
            for service in rng.sample(services, rng.randint(1, 4)):
                quantity = rng.randint(1, 3)
                discount = Decimal(rng.choice(['0', '0', '50']))
                lines.append({
                    'description': service.name,
                    'quantity': quantity,
                    'rate': service.price,
                    'discount': discount,
                    'amount': line_amount(quantity, service.price, discount),
                })
            subtotal = sum((line['amount'] for line in lines), Decimal('0'))
            bills.append(create_bill({
                'patient_id': rng.choice(patients).id,
                'bill_date': now - timedelta(days=rng.randint(0, 10)),
                'subtotal': subtotal,
                'tax': Decimal('0'),
                'discount': Decimal('0'),
                'total': subtotal,
                'status': rng.choice(['pending', 'paid', 'paid', 'overdue']),
                'items': lines,
            }))
        return bills
