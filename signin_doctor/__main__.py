"""Allow ``python -m signin_doctor``."""

from signin_doctor.main import run

run()
