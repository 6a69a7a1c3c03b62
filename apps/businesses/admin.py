"""
Admin interface for categories, businesses and products.
"""

from django.contrib import admin

from .models import Business, Category, Product


@admin.register(Category)
class CategoryAdmin(admin.ModelAdmin):
    list_display = ['name', 'slug', 'created_at']
    search_fields = ['name']
    prepopulated_fields = {'slug': ('name',)}


@admin.register(Business)
class BusinessAdmin(admin.ModelAdmin):
    list_display = ['name', 'category', 'owner', 'status', 'is_featured', 'updated_at']
    list_filter = ['status', 'is_featured', 'category']
    search_fields = ['name', 'owner_name', 'address', 'owner__username']
    readonly_fields = ['id', 'created_at', 'updated_at']
    raw_id_fields = ['owner']

    fieldsets = (
        ('Basic Information', {
            'fields': ('id', 'name', 'slug', 'category', 'owner', 'owner_name', 'description'),
        }),
        ('Location & Contact', {
            'fields': ('address', 'latitude', 'longitude', 'phone', 'whatsapp', 'email'),
        }),
        ('Visibility', {
            'fields': ('status', 'is_featured'),
        }),
        ('Timestamps', {
            'fields': ('created_at', 'updated_at'),
            'classes': ('collapse',),
        }),
    )

    def get_readonly_fields(self, request, obj=None):
        # Owner is fixed at creation
        if obj is not None:
            return self.readonly_fields + ['owner']
        return self.readonly_fields


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = ['name', 'business', 'price_range', 'is_featured', 'updated_at']
    list_filter = ['is_featured']
    search_fields = ['name', 'business__name']
    readonly_fields = ['id', 'created_at', 'updated_at']
    raw_id_fields = ['business']
