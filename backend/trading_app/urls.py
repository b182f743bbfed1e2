from django.contrib import admin
from django.urls import path, include


urlpatterns = [
    path('admin-panel/', admin.site.urls),

    # Core / Accounts
    path('api/accounts/', include('accounts.urls')),
    path('api/wallet/', include('wallets.urls')),
    path('api/portfolio/', include('portfolio.urls')),

    # Games
    path('api/roulette/', include('roulette.urls')),
    path('api/daily-draw/', include('daily_draw.urls')),
    path('api/lootboxes/', include('lootboxes.urls')),
]
