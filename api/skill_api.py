from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from starlette.responses import JSONResponse

from db.db_conn import get_db
from services.skill_service import SkillService
from utils import app_logger, resp_msgs

router = APIRouter(prefix="/skills", tags=["skills"])


@router.get("", status_code=status.HTTP_200_OK)
@app_logger.functionlogs(log="app")
def list_skills(db: Session = Depends(get_db)):
    try:
        return JSONResponse(content=SkillService.list_skills(db=db), status_code=status.HTTP_200_OK)
    except Exception as e:
        app_logger.exceptionlogs(f"Error while listing skills, Error: {e}")
        return JSONResponse(
            content={"message": resp_msgs.STATUS_500_MSG},
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR
        )
