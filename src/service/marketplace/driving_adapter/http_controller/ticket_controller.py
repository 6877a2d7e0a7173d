from typing import List, Optional

from fastapi import APIRouter, Depends, Response, status

from src.platform.logging.loguru_io import Logger
from src.service.marketplace.app.command.create_ticket_use_case import CreateTicketUseCase
from src.service.marketplace.app.command.delete_ticket_use_case import DeleteTicketUseCase
from src.service.marketplace.app.command.set_ticket_advertised_use_case import (
    SetTicketAdvertisedUseCase,
)
from src.service.marketplace.app.command.set_ticket_verification_use_case import (
    SetTicketVerificationUseCase,
)
from src.service.marketplace.app.command.update_ticket_use_case import UpdateTicketUseCase
from src.service.marketplace.app.query.get_ticket_use_case import GetTicketUseCase
from src.service.marketplace.app.query.list_tickets_use_case import ListTicketsUseCase
from src.service.marketplace.domain.value_object.identity import Identity
from src.service.marketplace.driving_adapter.http_controller.auth.role_auth import (
    get_current_identity,
    get_optional_identity,
)
from src.service.marketplace.driving_adapter.http_controller.schema.ticket_schema import (
    AdvertiseRequest,
    TicketCreateRequest,
    TicketResponse,
    TicketUpdateRequest,
    VerificationRequest,
)


router = APIRouter()


@router.get('', response_model=List[TicketResponse])
@Logger.io
async def list_public_tickets(
    advertised: bool = False,
    use_case: ListTicketsUseCase = Depends(ListTicketsUseCase.depends),
) -> List[TicketResponse]:
    tickets = await use_case.list_public(advertised_only=advertised)
    return [TicketResponse.model_validate(ticket) for ticket in tickets]


@router.get('/vendor', response_model=List[TicketResponse])
@Logger.io
async def list_vendor_tickets(
    identity: Identity = Depends(get_current_identity),
    use_case: ListTicketsUseCase = Depends(ListTicketsUseCase.depends),
) -> List[TicketResponse]:
    tickets = await use_case.list_vendor_tickets(identity=identity)
    return [TicketResponse.model_validate(ticket) for ticket in tickets]


@router.get('/review', response_model=List[TicketResponse])
@Logger.io
async def list_tickets_for_review(
    verification_status: Optional[str] = None,
    identity: Identity = Depends(get_current_identity),
    use_case: ListTicketsUseCase = Depends(ListTicketsUseCase.depends),
) -> List[TicketResponse]:
    tickets = await use_case.list_for_review(
        identity=identity, verification_status=verification_status
    )
    return [TicketResponse.model_validate(ticket) for ticket in tickets]


@router.get('/{ticket_id}', response_model=TicketResponse)
@Logger.io
async def get_ticket(
    ticket_id: str,
    identity: Optional[Identity] = Depends(get_optional_identity),
    use_case: GetTicketUseCase = Depends(GetTicketUseCase.depends),
) -> TicketResponse:
    ticket = await use_case.get_by_id(ticket_id=ticket_id, identity=identity)
    return TicketResponse.model_validate(ticket)


@router.post('', response_model=TicketResponse, status_code=status.HTTP_201_CREATED)
@Logger.io
async def create_ticket(
    request: TicketCreateRequest,
    identity: Identity = Depends(get_current_identity),
    use_case: CreateTicketUseCase = Depends(CreateTicketUseCase.depends),
) -> TicketResponse:
    ticket = await use_case.execute(identity=identity, **request.model_dump())
    return TicketResponse.model_validate(ticket)


@router.patch('/{ticket_id}', response_model=TicketResponse)
@Logger.io
async def update_ticket(
    ticket_id: str,
    request: TicketUpdateRequest,
    identity: Identity = Depends(get_current_identity),
    use_case: UpdateTicketUseCase = Depends(UpdateTicketUseCase.depends),
) -> TicketResponse:
    ticket = await use_case.execute(
        identity=identity, ticket_id=ticket_id, changes=request.model_dump(exclude_unset=True)
    )
    return TicketResponse.model_validate(ticket)


@router.delete('/{ticket_id}', status_code=status.HTTP_204_NO_CONTENT)
@Logger.io
async def delete_ticket(
    ticket_id: str,
    identity: Identity = Depends(get_current_identity),
    use_case: DeleteTicketUseCase = Depends(DeleteTicketUseCase.depends),
) -> Response:
    await use_case.execute(identity=identity, ticket_id=ticket_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.patch('/{ticket_id}/verification', response_model=TicketResponse)
@Logger.io
async def set_ticket_verification(
    ticket_id: str,
    request: VerificationRequest,
    identity: Identity = Depends(get_current_identity),
    use_case: SetTicketVerificationUseCase = Depends(SetTicketVerificationUseCase.depends),
) -> TicketResponse:
    ticket = await use_case.execute(identity=identity, ticket_id=ticket_id, status=request.status)
    return TicketResponse.model_validate(ticket)


@router.patch('/{ticket_id}/advertise', response_model=TicketResponse)
@Logger.io
async def set_ticket_advertised(
    ticket_id: str,
    request: AdvertiseRequest,
    identity: Identity = Depends(get_current_identity),
    use_case: SetTicketAdvertisedUseCase = Depends(SetTicketAdvertisedUseCase.depends),
) -> TicketResponse:
    ticket = await use_case.execute(
        identity=identity, ticket_id=ticket_id, advertised=request.advertised
    )
    return TicketResponse.model_validate(ticket)
