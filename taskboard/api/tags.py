"""API endpoints для работы с тегами."""

from fastapi import APIRouter, Depends, status

from ..schemas import ErrorResponse, TagInsert, TagResponse
from ..services import TagService
from .dependencies import get_tag_service

router = APIRouter(prefix="/tags", tags=["tags"])


@router.get("", response_model=list[TagResponse], summary="Список тегов")
async def list_tags(service: TagService = Depends(get_tag_service)) -> list[TagResponse]:
    tags = await service.get_tags()
    return [TagResponse.model_validate(t) for t in tags]


@router.post(
    "",
    response_model=TagResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Создать тег",
    responses={400: {"model": ErrorResponse, "description": "Ошибка валидации или имя занято"}},
)
async def create_tag(data: TagInsert, service: TagService = Depends(get_tag_service)) -> TagResponse:
    tag = await service.create_tag(data)
    return TagResponse.model_validate(tag)
