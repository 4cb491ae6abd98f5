from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import JSONResponse

from posthub.api.deps import post_service
from posthub.schemas import CreatePostDto, EditPostDto, ReadPostDto
from posthub.services.posts import PostService

router = APIRouter(prefix="/api/Post", tags=["posts"])


@router.get("", response_model=List[ReadPostDto])
async def get_all_posts(service: PostService = Depends(post_service)) -> List[ReadPostDto]:
    return await service.get_all()


@router.get("/{post_id}", response_model=ReadPostDto)
async def get_post(post_id: int, service: PostService = Depends(post_service)) -> ReadPostDto:
    return await service.get_by_id(post_id)


@router.post("", status_code=201)
async def create_post(
    dto: CreatePostDto, request: Request, service: PostService = Depends(post_service)
) -> JSONResponse:
    new_id = await service.create(dto)
    location = str(request.url_for("get_post", post_id=new_id))
    return JSONResponse(status_code=201, content=new_id, headers={"Location": location})


@router.put("/{post_id}", response_model=ReadPostDto)
async def edit_post(
    post_id: int, dto: EditPostDto, service: PostService = Depends(post_service)
) -> ReadPostDto:
    return await service.edit(post_id, dto)


@router.delete("/{post_id}", status_code=204)
async def delete_post(post_id: int, service: PostService = Depends(post_service)) -> Response:
    await service.delete(post_id)
    return Response(status_code=204)
