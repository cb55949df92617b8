from django.contrib import admin
from django.urls import include, path

urlpatterns = [
    # Django's own model admin; the site's admin console lives at /admin/
    path('django-admin/', admin.site.urls),

    path('', include('savage_nation.main.urls')),
    path('', include('savage_nation.accounts.urls')),
    path('store/', include('savage_nation.store.urls')),
    path('weekly-blog/', include('savage_nation.blog.urls')),
    path('toolshed/', include('savage_nation.toolshed.urls')),
    path('admin/', include('admin_portal.urls')),
]

handler404 = 'savage_nation.main.views.not_found'
