# module brave_backend.app
from brave_backend.app_setup.factory import create_app

# App globale
app = create_app()
