import re

from rest_framework import serializers

from desk.models import Patient
from desk.serializers.fields import OptionalDateTimeField, clean_text

PHONE_RE = re.compile(r'^[\d\s+\-()]+$')
MIN_PHONE_DIGITS = 10

OPTIONAL_TEXT = (
    'father_husband_name',
    'address',
    'emergency_contact',
    'blood_group',
    'medical_history',
)


class PatientSerializer(serializers.Serializer):
    """Validates registration input; use ``partial=True`` for edits."""
    firstName = serializers.CharField(source='first_name', max_length=100)
    lastName = serializers.CharField(source='last_name', max_length=100)
    fatherHusbandName = serializers.CharField(
        source='father_husband_name', max_length=200, required=False, allow_blank=True, allow_null=True
    )
    age = serializers.IntegerField(min_value=1, max_value=120)
    gender = serializers.CharField(max_length=10)
    phone = serializers.CharField(max_length=20)
    email = serializers.EmailField(required=False, allow_blank=True, allow_null=True)
    address = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    emergencyContact = serializers.CharField(
        source='emergency_contact', max_length=200, required=False, allow_blank=True, allow_null=True
    )
    bloodGroup = serializers.CharField(
        source='blood_group', max_length=10, required=False, allow_blank=True, allow_null=True
    )
    medicalHistory = serializers.CharField(
        source='medical_history', required=False, allow_blank=True, allow_null=True
    )
    admissionDateTime = OptionalDateTimeField(source='admission_date_time', required=False, allow_null=True)
    dischargeDateTime = OptionalDateTimeField(source='discharge_date_time', required=False, allow_null=True)
    status = serializers.ChoiceField(choices=Patient.STATUS_CHOICES, required=False)

    def validate_firstName(self, v):
        v = clean_text(v)
        if not v:
            raise serializers.ValidationError('First name is required')
        return v

    def validate_lastName(self, v):
        v = clean_text(v)
        if not v:
            raise serializers.ValidationError('Last name is required')
        return v

    def validate_gender(self, v):
        v = (v or '').strip().lower()
        if v not in dict(Patient.GENDER_CHOICES):
            raise serializers.ValidationError('Gender must be male, female or other')
        return v

    def validate_phone(self, v):
        v = clean_text(v)
        digits = re.sub(r'\D', '', v)
        if not PHONE_RE.match(v) or len(digits) < MIN_PHONE_DIGITS:
            raise serializers.ValidationError(f'Phone must contain at least {MIN_PHONE_DIGITS} digits')
        return v

    def validate_email(self, v):
        return (v or '').strip() or None

    def validate(self, attrs):
        for attr in OPTIONAL_TEXT:
            if attr in attrs:
                attrs[attr] = clean_text(attrs[attr]) or None
        admitted = attrs.get('admission_date_time', getattr(self.instance, 'admission_date_time', None))
        discharged = attrs.get('discharge_date_time', getattr(self.instance, 'discharge_date_time', None))
        if admitted and discharged and discharged < admitted:
            raise serializers.ValidationError({'dischargeDateTime': ['Discharge must not be before admission']})
        return attrs


class PatientListQuerySerializer(serializers.Serializer):
    search = serializers.CharField(required=False, allow_blank=True, max_length=100)
