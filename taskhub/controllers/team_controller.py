# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Controller: Teams — creation, membership, lookup, admin deletion."""
from fastapi import APIRouter, Depends, Query

from taskhub.core.config import settings
from taskhub.core.dependencies import get_current_user, get_team_service, require_role
from taskhub.core.errors import ServiceError
from taskhub.core.responses import http_error, success
from taskhub.models.user import ROLE_ADMIN
from taskhub.schemas.team import MemberRequest, TeamCreateRequest
from taskhub.services.team_service import TeamService

router = APIRouter(prefix=f"{settings.API_PREFIX}/teams", tags=["Teams"])


@router.post("", status_code=201)
def create_team(body: TeamCreateRequest, user: dict = Depends(get_current_user),
                service: TeamService = Depends(get_team_service)):
    try:
        return success(service.create_team(user, body.name, promote=True), "Team created")
    except ServiceError as exc:
        raise http_error(exc)


@router.get("")
def list_teams(page: int = Query(default=1, ge=1),
               limit: int = Query(default=settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
               _user: dict = Depends(get_current_user),
               service: TeamService = Depends(get_team_service)):
    return success(service.list_teams(page, limit), "Teams fetched")


@router.get("/{team_id}")
def get_team(team_id: str, _user: dict = Depends(get_current_user),
             service: TeamService = Depends(get_team_service)):
    try:
        return success(service.get_team(team_id), "Team fetched")
    except ServiceError as exc:
        raise http_error(exc)


@router.post("/{team_id}/members")
def add_member(team_id: str, body: MemberRequest, user: dict = Depends(get_current_user),
               service: TeamService = Depends(get_team_service)):
    try:
        return success(service.add_member(team_id, body.user_id, user), "Member added")
    except ServiceError as exc:
        raise http_error(exc)


@router.post("/{team_id}/members/remove")
def remove_member(team_id: str, body: MemberRequest, user: dict = Depends(get_current_user),
                  service: TeamService = Depends(get_team_service)):
    try:
        return success(service.remove_member(team_id, body.user_id, user), "Member removed")
    except ServiceError as exc:
        raise http_error(exc)


@router.delete("/{team_id}")
def delete_team(team_id: str, admin: dict = Depends(require_role(ROLE_ADMIN)),
                service: TeamService = Depends(get_team_service)):
    try:
        service.delete_team(team_id, admin)
    except ServiceError as exc:
        raise http_error(exc)
    return success(None, "Team deleted")
