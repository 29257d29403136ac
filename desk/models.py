"""
Database models for the hospital front office.

Four tables back the system: patients, the service price list, bill
headers and their line items.  Monetary columns are fixed-point decimals
with two places.  A bill references its patient without a database
foreign-key constraint so that removing a patient never touches issued
bills; read paths treat a missing patient as an orphaned bill.
"""
from __future__ import annotations

from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models


class Patient(models.Model):
    """A registered patient with contact and clinical metadata."""
    GENDER_CHOICES = [
        ('male', 'Male'),
        ('female', 'Female'),
        ('other', 'Other'),
    ]
    STATUS_ACTIVE = 'active'
    STATUS_INACTIVE = 'inactive'
    STATUS_CHOICES = [
        (STATUS_ACTIVE, 'Active'),
        (STATUS_INACTIVE, 'Inactive'),
    ]

    first_name = models.CharField(max_length=100)
    last_name = models.CharField(max_length=100)
    father_husband_name = models.CharField(max_length=200, blank=True, null=True)
    age = models.PositiveSmallIntegerField(validators=[MinValueValidator(1), MaxValueValidator(120)])
    gender = models.CharField(max_length=10, choices=GENDER_CHOICES)
    # Searched by substring, kept as entered (digits plus separators)
    phone = models.CharField(max_length=20, db_index=True)
    email = models.EmailField(blank=True, null=True)
    address = models.TextField(blank=True, null=True)
    emergency_contact = models.CharField(max_length=200, blank=True, null=True)
    blood_group = models.CharField(max_length=10, blank=True, null=True)
    medical_history = models.TextField(blank=True, null=True)
    admission_date_time = models.DateTimeField(blank=True, null=True)
    discharge_date_time = models.DateTimeField(blank=True, null=True)
    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default=STATUS_ACTIVE, db_index=True)
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)

    class Meta:
        db_table = 'patients'
        ordering = ['-created_at', '-id']

    def __str__(self) -> str:
        return f"{self.full_name} (#{self.pk})"

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


class ServiceItem(models.Model):
    """A billable service in the price list.

    Bill line items copy the name and price at billing time, so editing
    a service never changes bills that were already issued.
    """
    STATUS_CHOICES = Patient.STATUS_CHOICES

    name = models.CharField(max_length=200)
    description = models.TextField(blank=True, null=True)
    price = models.DecimalField(max_digits=10, decimal_places=2, validators=[MinValueValidator(0)])
    category = models.CharField(max_length=100, blank=True, null=True, db_index=True)
    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default=Patient.STATUS_ACTIVE)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'service_items'
        ordering = ['-created_at', '-id']

    def __str__(self) -> str:
        return f"{self.name} ({self.price})"


class Bill(models.Model):
    """An invoice header issued to a patient.

    ``bill_number`` is the human-facing invoice identifier (``B000001``),
    distinct from the numeric primary key.  Totals are computed by the
    caller from the line items.
    """
    STATUS_PENDING = 'pending'
    STATUS_PAID = 'paid'
    STATUS_OVERDUE = 'overdue'
    STATUS_CHOICES = [
        (STATUS_PENDING, 'Pending'),
        (STATUS_PAID, 'Paid'),
        (STATUS_OVERDUE, 'Overdue'),
    ]

    bill_number = models.CharField(max_length=20, unique=True, editable=False)
    patient = models.ForeignKey(
        Patient,
        on_delete=models.DO_NOTHING,
        db_constraint=False,
        related_name='bills',
    )
    bill_date = models.DateTimeField(db_index=True)
    subtotal = models.DecimalField(max_digits=12, decimal_places=2, validators=[MinValueValidator(0)])
    tax = models.DecimalField(max_digits=12, decimal_places=2, default=0, validators=[MinValueValidator(0)])
    discount = models.DecimalField(max_digits=12, decimal_places=2, default=0, validators=[MinValueValidator(0)])
    total = models.DecimalField(max_digits=12, decimal_places=2, validators=[MinValueValidator(0)])
    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default=STATUS_PENDING, db_index=True)
    notes = models.TextField(blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)

    class Meta:
        db_table = 'bills'
        ordering = ['-created_at', '-id']

    def __str__(self) -> str:
        return f"{self.bill_number} ({self.status})"


class BillItem(models.Model):
    """One line of a bill.  Deleted together with its bill."""
    bill = models.ForeignKey(Bill, on_delete=models.CASCADE, related_name='items')
    serial_number = models.PositiveIntegerField()
    description = models.CharField(max_length=255)
    quantity = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    rate = models.DecimalField(max_digits=10, decimal_places=2, validators=[MinValueValidator(0)])
    discount = models.DecimalField(max_digits=10, decimal_places=2, default=0, validators=[MinValueValidator(0)])
    amount = models.DecimalField(max_digits=12, decimal_places=2, validators=[MinValueValidator(0)])

    class Meta:
        db_table = 'bill_items'
        ordering = ['bill_id', 'serial_number']
        constraints = [
            models.UniqueConstraint(fields=['bill', 'serial_number'], name='uniq_bill_item_serial'),
        ]

    def __str__(self) -> str:
        return f"{self.bill_id}#{self.serial_number} {self.description}"
