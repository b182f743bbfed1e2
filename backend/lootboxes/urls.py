from django.urls import path

from . import views

urlpatterns = [
    path("", views.lootbox_list, name="lootbox-list"),
    path("<int:pk>/purchase/", views.purchase, name="lootbox-purchase"),
    path("mine/", views.mine, name="lootbox-mine"),
    path("mine/<uuid:instance_id>/redeem/", views.redeem, name="lootbox-redeem"),
]
