"""Settings package for the HandyConnect project.

`base.py` holds configuration shared by every environment. `dev.py`,
`test.py` and `prod.py` extend it with environment specific overrides;
select one through ``DJANGO_SETTINGS_MODULE``.
"""
