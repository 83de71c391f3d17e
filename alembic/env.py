from logging.config import fileConfig

from alembic import context
from sqlmodel import SQLModel

from doclify.database import engine

import doclify.models.project  # noqa
import doclify.models.team_member  # noqa
import doclify.models.technology  # noqa
import doclify.models.objective  # noqa
import doclify.models.requirement  # noqa
import doclify.models.milestone  # noqa
import doclify.models.audience  # noqa
import doclify.models.payment  # noqa
import doclify.models.stakeholder  # noqa
import doclify.models.wizard_session  # noqa
import doclify.models.commit_attempt  # noqa

config = context.config
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = SQLModel.metadata

def run_migrations_offline() -> None:
    url = engine.url.render_as_string(hide_password=False)
    context.configure(
        url=url,
        target_metadata=target_metadata,
        literal_binds=True,
        compare_type=True,
        render_as_batch=url.startswith("sqlite"),
    )

    with context.begin_transaction():
        context.run_migrations()

def run_migrations_online() -> None:
    with engine.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            compare_type=True,
            render_as_batch=connection.dialect.name == "sqlite",
        )

        with context.begin_transaction():
            context.run_migrations()

if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
