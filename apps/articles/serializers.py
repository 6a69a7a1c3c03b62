"""
Serializers for articles.

Write serializers only validate shape; who may do what, and when, is
decided by ArticlePolicy inside ArticleModerationService.
"""

from rest_framework import serializers

from apps.businesses.models import Business

from .models import Article


class ArticleSerializer(serializers.ModelSerializer):
    """
    Article as seen by its owner. Status is accepted on create only;
    afterwards it moves through the submit action.
    """

    business_name = serializers.CharField(source='business.name', read_only=True)
    status = serializers.ChoiceField(choices=Article.STATUS_CHOICES, required=False)
    status_display = serializers.CharField(source='get_status_display', read_only=True)

    class Meta:
        model = Article
        fields = [
            'id',
            'business',
            'business_name',
            'title',
            'slug',
            'excerpt',
            'content',
            'status',
            'status_display',
            'seo_title',
            'seo_description',
            'rejection_notes',
            'approved_at',
            'published_at',
            'created_at',
            'updated_at',
        ]
        read_only_fields = [
            'id', 'business', 'slug', 'rejection_notes', 'approved_at',
            'published_at', 'created_at', 'updated_at',
        ]
        extra_kwargs = {
            'excerpt': {'allow_blank': True, 'required': False},
            'seo_title': {'allow_blank': True, 'required': False},
            'seo_description': {'allow_blank': True, 'required': False},
        }

    def validate(self, attrs):
        if self.instance is not None and 'status' in attrs:
            raise serializers.ValidationError(
                {'status': "Status cannot be edited; use the moderation actions."}
            )
        return attrs


class AdminArticleSerializer(ArticleSerializer):
    """Article for village admins: any business, plus review metadata."""

    business = serializers.PrimaryKeyRelatedField(queryset=Business.objects.all(), required=False)
    approved_by_username = serializers.CharField(
        source='approved_by.username', read_only=True, allow_null=True,
    )

    class Meta(ArticleSerializer.Meta):
        fields = ArticleSerializer.Meta.fields + ['approved_by', 'approved_by_username']
        read_only_fields = [
            'id', 'slug', 'rejection_notes', 'approved_by', 'approved_at',
            'published_at', 'created_at', 'updated_at',
        ]

    def validate(self, attrs):
        attrs = super().validate(attrs)
        if self.instance is None and 'business' not in attrs:
            raise serializers.ValidationError({'business': "This field is required."})
        return attrs


class ArticleRejectSerializer(serializers.Serializer):
    # Blank and length are checked by the moderation service
    rejection_notes = serializers.CharField(required=False, allow_blank=True, trim_whitespace=False)


class PublicArticleSerializer(serializers.ModelSerializer):
    """Published article for the public site."""

    business = serializers.SerializerMethodField()

    class Meta:
        model = Article
        fields = [
            'id',
            'title',
            'slug',
            'excerpt',
            'content',
            'seo_title',
            'seo_description',
            'published_at',
            'business',
        ]
        read_only_fields = fields

    def get_business(self, obj):
        return {'name': obj.business.name, 'slug': obj.business.slug}
