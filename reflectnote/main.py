import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.exc import SQLAlchemyError

from reflectnote.core import config
from reflectnote.database import ensure_record_schema
from reflectnote.repositories.classes import ClassRepository
from reflectnote.repositories.users import UserRepository
from reflectnote.routes import class_routes, reflection_routes, user_routes
from reflectnote.routes.dependencies import get_store
from reflectnote.seed import BootstrapSeeder

app = FastAPI()

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=['*'],
    allow_headers=['*'],
)

logger = logging.getLogger(__name__)


@app.on_event('startup')
def initialize_storage() -> None:
    config.validate_runtime_config()
    try:
        ensure_record_schema()
        store = get_store()
        users = UserRepository(store)
        BootstrapSeeder(users, ClassRepository(store, users)).init()
    except SQLAlchemyError:
        logger.exception('Storage initialization failed. Check DATABASE_URL.')


@app.get('/')
def root():
    return {'status': 'Reflection Note API Running'}


app.include_router(user_routes.router, prefix='/users')
app.include_router(class_routes.router, prefix='/classes')
app.include_router(reflection_routes.router, prefix='/reflections')
