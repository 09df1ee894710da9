from fastapi import APIRouter, Depends, Query
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import PlainTextResponse, StreamingResponse
from sqlalchemy.ext.asyncio import AsyncSession

from omnitrackr.dependencies import get_current_user, get_db
from omnitrackr.schemas.auth import AuthContext
from omnitrackr.services import analysis
from omnitrackr.services import stats as stats_service
from omnitrackr.utils.result import Err, Ok, to_response

router = APIRouter(prefix="/api/stats", tags=["stats"])


@router.get("/overview")
async def get_overview(db: AsyncSession = Depends(get_db), current_user: AuthContext = Depends(get_current_user)):
    return to_response(await stats_service.overview(db, current_user))


@router.get("/by-category")
async def get_by_category(db: AsyncSession = Depends(get_db), current_user: AuthContext = Depends(get_current_user)):
    return to_response(await stats_service.by_category(db, current_user))


@router.get("/by-tag")
async def get_by_tag(db: AsyncSession = Depends(get_db), current_user: AuthContext = Depends(get_current_user)):
    return to_response(await stats_service.by_tag(db, current_user))


@router.get("/timeline")
async def get_timeline(
    days: int = Query(stats_service.DEFAULT_TIMELINE_DAYS),
    db: AsyncSession = Depends(get_db),
    current_user: AuthContext = Depends(get_current_user),
):
    return to_response(await stats_service.timeline(db, current_user, days))


async def _chart(frame_result, render):
    if isinstance(frame_result, Err):
        return to_response(frame_result)
    img_buf = await run_in_threadpool(render, frame_result.data)
    if img_buf is None:
        return to_response(Ok({"message": "No data"}))
    return StreamingResponse(img_buf, media_type="image/png")


@router.get("/visualizations/by-category")
async def get_category_chart(db: AsyncSession = Depends(get_db), current_user: AuthContext = Depends(get_current_user)):
    df = await analysis.get_category_dataframe(db, current_user)
    return await _chart(df, analysis.generate_category_pie)


@router.get("/visualizations/by-tag")
async def get_tag_chart(db: AsyncSession = Depends(get_db), current_user: AuthContext = Depends(get_current_user)):
    df = await analysis.get_tag_dataframe(db, current_user)
    return await _chart(df, analysis.generate_tag_bar)


@router.get("/visualizations/timeline")
async def get_timeline_chart(
    days: int = Query(stats_service.DEFAULT_TIMELINE_DAYS),
    db: AsyncSession = Depends(get_db),
    current_user: AuthContext = Depends(get_current_user),
):
    df = await analysis.get_timeline_dataframe(db, current_user, days)
    return await _chart(df, analysis.generate_timeline_chart)


@router.get("/reports/csv")
async def get_csv_report(db: AsyncSession = Depends(get_db), current_user: AuthContext = Depends(get_current_user)):
    result = await analysis.generate_csv_report(db, current_user)
    if isinstance(result, Err):
        return to_response(result)
    return PlainTextResponse(
        content=result.data,
        media_type="text/csv",
        headers={"Content-Disposition": "attachment; filename=activities_report.csv"},
    )
