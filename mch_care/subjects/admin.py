from django.contrib import admin

from mch_care.subjects.models import Child, Pregnancy


@admin.register(Child)
class ChildAdmin(admin.ModelAdmin):
    list_display = ["child_id", "first_name", "last_name", "date_of_birth", "owner"]
    search_fields = ["first_name", "last_name"]


@admin.register(Pregnancy)
class PregnancyAdmin(admin.ModelAdmin):
    list_display = ["pregnancy_id", "mother_name", "expected_delivery_date", "is_active", "owner"]
    list_filter = ["is_active"]
