"""
https://python-dependency-injector.ets-labs.org/index.html
https://python-dependency-injector.ets-labs.org/examples/fastapi-sqlalchemy.html
"""

from dependency_injector import containers, providers

from src.platform.config.core_setting import Settings
from src.platform.database.orm_db_setting import Database
from src.platform.database.unit_of_work import SqlAlchemyUnitOfWork
from src.service.marketplace.app.policy.advertisement_slot_policy import AdvertisementSlotPolicy
from src.service.marketplace.driving_adapter.http_controller.auth.jwt_auth import JwtAuth


class Container(containers.DeclarativeContainer):
    # Configuration
    config_service = providers.Singleton(Settings)

    database = providers.Singleton(Database)

    # One unit of work (one session, one transaction) per use case invocation
    unit_of_work = providers.Factory(
        SqlAlchemyUnitOfWork, session_factory=database.provided.new_session
    )

    # Policies
    advertisement_slot_policy = providers.Singleton(
        AdvertisementSlotPolicy, max_slots=config_service.provided.MAX_ADVERTISED_TICKETS
    )

    # Auth service
    jwt_auth = providers.Singleton(JwtAuth)


container = Container()
