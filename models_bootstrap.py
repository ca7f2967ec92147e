# models_bootstrap.py
from employee import models as _employee_models
