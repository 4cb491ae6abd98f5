from __future__ import annotations

from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import JSONResponse

from posthub.api.deps import comment_service, require_user
from posthub.schemas import CreateCommentDto, EditCommentDto, ReadCommentDto
from posthub.services.comments import CommentService

router = APIRouter(prefix="/api/Comment", tags=["comments"], dependencies=[Depends(require_user)])


@router.get("/{comment_id}", response_model=ReadCommentDto)
async def get_comment(
    comment_id: int, service: CommentService = Depends(comment_service)
) -> ReadCommentDto:
    return await service.get(comment_id)


@router.post("/{post_id}", status_code=201)
async def create_comment(
    post_id: int,
    dto: CreateCommentDto,
    request: Request,
    service: CommentService = Depends(comment_service),
) -> JSONResponse:
    new_id = await service.create(post_id, dto)
    location = str(request.url_for("get_comment", comment_id=new_id))
    return JSONResponse(status_code=201, content=new_id, headers={"Location": location})


@router.put("/{comment_id}", response_model=ReadCommentDto)
async def edit_comment(
    comment_id: int, dto: EditCommentDto, service: CommentService = Depends(comment_service)
) -> ReadCommentDto:
    return await service.edit(comment_id, dto)


@router.delete("/{comment_id}", status_code=204)
async def delete_comment(
    comment_id: int, service: CommentService = Depends(comment_service)
) -> Response:
    await service.delete(comment_id)
    return Response(status_code=204)
