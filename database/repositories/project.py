import logging
from typing import Any, List, Optional

from sqlalchemy import select, or_
from sqlalchemy.orm.exc import StaleDataError

from core.errors import ConcurrentUpdateError
from database.models import Project
from database.repositories.base import BaseRepository

logger = logging.getLogger(__name__)


class ProjectRepository(BaseRepository):
    def get_by_id(self, project_id: Any) -> Optional[Project]:
        return self.db.get(Project, project_id)

    def get_for_update(self, project_id: Any) -> Optional[Project]:
        """
        Read a project with a row lock for a read-decide-write sequence.

        ``populate_existing`` discards any copy already in the identity map so
        the decision is always made against the committed row. Backends without
        row locks still get the versioned UPDATE as the conflict check.
        """
        stmt = (
            select(Project)
            .where(Project.id == project_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        return self.db.execute(stmt).scalar_one_or_none()

    def create(self, owner_id: Any) -> Project:
        project = Project(owner_id=owner_id)
        self.db.add(project)
        self.db.flush()
        return project

    def list_for_owner(self, owner_id: Any) -> List[Project]:
        stmt = (
            select(Project)
            .where(Project.owner_id == owner_id)
            .order_by(Project.created_at.desc())
        )
        return list(self.db.execute(stmt).scalars().all())

    def list_for_freelancer(self, freelancer_id: Any) -> List[Project]:
        stmt = (
            select(Project)
            .where(or_(
                Project.team_designer_id == freelancer_id,
                Project.team_developer_id == freelancer_id
            ))
            .order_by(Project.updated_at.desc())
        )
        return list(self.db.execute(stmt).scalars().all())

    def save(self, project: Project) -> None:
        """
        Flush pending changes for ``project``.

        The UPDATE carries ``WHERE version_id = <seen>``; zero matched rows means
        another transaction committed first.
        """
        try:
            self.db.flush()
        except StaleDataError as e:
            logger.warning(f"Project {project.id} was modified concurrently: {e}")
            raise ConcurrentUpdateError(
                f"Project {project.id} was modified by another request"
            ) from e
