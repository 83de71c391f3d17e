# create_tables.py
from sqlmodel import SQLModel
from doclify.database import engine
import doclify.models.project
import doclify.models.team_member
import doclify.models.technology
import doclify.models.objective
import doclify.models.requirement
import doclify.models.milestone
import doclify.models.audience
import doclify.models.payment
import doclify.models.stakeholder
import doclify.models.wizard_session
import doclify.models.commit_attempt


def create_db_and_tables():
    SQLModel.metadata.create_all(engine)

if __name__ == "__main__":
    create_db_and_tables()
