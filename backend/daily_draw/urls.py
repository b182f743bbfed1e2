from django.urls import path
from . import views

urlpatterns = [
    path("", views.draw_state, name="daily-draw-state"),
    path("enter/", views.enter, name="daily-draw-enter"),
    path("pot/", views.pot, name="daily-draw-pot"),
    path("winners/", views.winners, name="daily-draw-winners"),
    path("select-winner/", views.select_winner_view, name="daily-draw-select-winner"),
]
