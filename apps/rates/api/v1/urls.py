from django.urls import path, include
from rest_framework.routers import DefaultRouter

from apps.rates.api.v1.views import RateViewSet

router = DefaultRouter()
router.register(r'rates', RateViewSet, basename='rate')

urlpatterns = [
    path('', include(router.urls)),
]
