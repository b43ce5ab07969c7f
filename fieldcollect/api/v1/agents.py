"""
Field agent management endpoints
"""
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from fieldcollect.core.authorization import Action
from fieldcollect.core.deps import get_db, require_action
from fieldcollect.models.user import User
from fieldcollect.schemas.user import AgentCreate, AgentUpdate, UserOut
from fieldcollect.services.user_service import create_agent, list_agents, to_user_out, update_agent

router = APIRouter()


@router.get("", response_model=List[UserOut])
async def list_agents_endpoint(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_action(Action.LIST_AGENTS)),
):
    """List agents (admin, or secondary admin with viewAgents)"""
    return [to_user_out(agent) for agent in list_agents(db)]


@router.post("", response_model=UserOut, status_code=201)
async def create_agent_endpoint(
    agent_data: AgentCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_action(Action.CREATE_AGENT)),
):
    """Create an agent (createAgents)"""
    return to_user_out(create_agent(db, agent_data, current_user.id))


@router.put("/{agent_id}", response_model=UserOut)
async def update_agent_endpoint(
    agent_id: int,
    agent_data: AgentUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_action(Action.UPDATE_AGENT)),
):
    """Update an agent (editAgents)"""
    return to_user_out(update_agent(db, agent_id, agent_data, current_user.id))
