"""
Global semester templates: naming presets managed by the super admin.
"""

from typing import List, Optional
from uuid import UUID

from hostel_lifecycle.models.semester import GlobalSemester
from hostel_lifecycle.repositories.semester import GlobalSemesterRepository
from hostel_lifecycle.services.base import BaseService
from hostel_lifecycle.services.common.errors import ConflictError, NotFoundError
from hostel_lifecycle.services.common.validation import require_text


class GlobalSemesterService(BaseService):
    """CRUD for dateless semester templates."""

    def create(self, name: str, description: Optional[str] = None) -> GlobalSemester:
        name = require_text(name, "name")
        with self.transaction() as uow:
            repo = uow.get_repo(GlobalSemesterRepository)
            if repo.find_by_name(name) is not None:
                raise ConflictError(f"Global semester '{name}' already exists", conflicting_field="name")
            template = repo.create({"name": name, "description": description, "is_active": True})
        self._logger.info(f"Created global semester template {template.id} ({name})")
        return template

    def list_all(self) -> List[GlobalSemester]:
        with self.transaction() as uow:
            return uow.get_repo(GlobalSemesterRepository).list_all()

    def update(
        self,
        global_semester_id: UUID,
        name: Optional[str] = None,
        description: Optional[str] = None,
        is_active: Optional[bool] = None,
    ) -> GlobalSemester:
        with self.transaction() as uow:
            repo = uow.get_repo(GlobalSemesterRepository)
            template = repo.find_by_id(global_semester_id)
            if template is None:
                raise NotFoundError("Global semester", global_semester_id)

            changes = {}
            if name is not None:
                name = require_text(name, "name")
                existing = repo.find_by_name(name)
                if existing is not None and existing.id != template.id:
                    raise ConflictError(f"Global semester '{name}' already exists", conflicting_field="name")
                changes["name"] = name
            if description is not None:
                changes["description"] = description
            if is_active is not None:
                changes["is_active"] = is_active
            repo.update(template, changes)
        return template

    def delete(self, global_semester_id: UUID) -> None:
        """Hard delete; refused while any hostel semester references the template."""
        with self.transaction() as uow:
            repo = uow.get_repo(GlobalSemesterRepository)
            template = repo.find_by_id(global_semester_id)
            if template is None:
                raise NotFoundError("Global semester", global_semester_id)
            references = repo.count_references(global_semester_id)
            if references:
                raise ConflictError(
                    f"Global semester is used by {references} semester(s) and cannot be deleted",
                    details={"references": references},
                )
            repo.delete(template)
        self._logger.info(f"Deleted global semester template {global_semester_id}")
