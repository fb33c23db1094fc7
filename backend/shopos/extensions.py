# Overview: Flask extension instances for database, migrations and the state store.

from flask_sqlalchemy import SQLAlchemy
from flask_migrate import Migrate

from .state.extension import StateStoreExtension

db = SQLAlchemy()
migrate = Migrate()
state_store = StateStoreExtension()
