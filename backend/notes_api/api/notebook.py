from fastapi import APIRouter, Depends

from notes_api.api.deps import Services, get_current_user_id, get_services
from notes_api.models.notebook import NotebookOut

router = APIRouter(prefix="/api/notebook", tags=["notebook"])


@router.get("", response_model=NotebookOut)
def get_notebook(user_id: int = Depends(get_current_user_id), services: Services = Depends(get_services)) -> NotebookOut:
    return NotebookOut.from_entity(services.notebook.get_user_notebook(user_id))
