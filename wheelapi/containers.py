from dependency_injector import containers, providers

from wheelapi.config import Settings
from wheelapi.database.session import get_db
from wheelapi.services.job_service import JobService


class ConfigModule(containers.DeclarativeContainer):
    """Application configuration."""

    config = providers.Singleton(Settings)


class RepositoryModule(containers.DeclarativeContainer):
    """Database session."""

    get_db = providers.Resource(get_db)


class ServiceModule(containers.DeclarativeContainer):
    """Service layer dependencies (batch job CLI)."""

    repositories = providers.DependenciesContainer()

    job_service = providers.Factory(JobService, db=repositories.get_db)


class Container(containers.DeclarativeContainer):
    """Application container (used by the batch job CLI)."""

    config = providers.Container(ConfigModule)
    repositories = providers.Container(RepositoryModule)
    services = providers.Container(
        ServiceModule, repositories=repositories
    )
