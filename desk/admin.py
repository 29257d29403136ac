"""
Django admin registrations for the front-office models.

Front-desk staff manage records through the API; the admin site is for
inspecting and correcting data during development.  Bill numbers are
read-only here as everywhere else.
"""

from django.contrib import admin

from .models import Bill, BillItem, Patient, ServiceItem


@admin.register(Patient)
class PatientAdmin(admin.ModelAdmin):
    list_display = ('id', 'first_name', 'last_name', 'gender', 'age', 'phone', 'status', 'created_at')
    list_filter = ('status', 'gender')
    search_fields = ('first_name', 'last_name', 'phone', 'email')


@admin.register(ServiceItem)
class ServiceItemAdmin(admin.ModelAdmin):
    list_display = ('id', 'name', 'category', 'price', 'status', 'created_at')
    list_filter = ('status', 'category')
    search_fields = ('name', 'description')


class BillItemInline(admin.TabularInline):
    model = BillItem
    extra = 0
    ordering = ('serial_number',)


@admin.register(Bill)
class BillAdmin(admin.ModelAdmin):
    list_display = ('bill_number', 'patient_id', 'bill_date', 'total', 'status', 'created_at')
    list_filter = ('status',)
    search_fields = ('bill_number',)
    readonly_fields = ('bill_number', 'created_at')
    inlines = [BillItemInline]
