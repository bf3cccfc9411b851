"""
Settings package for the API management backend.
Select a module with DJANGO_SETTINGS_MODULE, e.g.
``backend.config.settings.development`` or ``backend.config.settings.production``.
"""
