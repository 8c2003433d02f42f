"""Live widget session over a WebSocket.

Clients send WidgetEvent messages and receive a WidgetSnapshot after
state changes. Consecutive snapshots produced while the socket is busy are
coalesced, so clients always see the latest state.
"""

import asyncio

import structlog
from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect

from src.api.dependencies import get_weather_service
from src.models.widget import WidgetEvent, WidgetSnapshot
from src.services.weather_service import WeatherService
from src.services.widget_service import WeatherWidget

logger = structlog.get_logger(__name__)

router = APIRouter()


async def _send_snapshots(
    websocket: WebSocket, updates: "asyncio.Queue[WidgetSnapshot]"
) -> None:
    """Forward the newest queued snapshot to the client."""
    while True:
        snapshot = await updates.get()
        while not updates.empty():
            snapshot = updates.get_nowait()
        await websocket.send_json(snapshot.model_dump(mode="json"))


def _track(tasks: set[asyncio.Task], coro) -> asyncio.Task:
    """Run an action in the background, keeping a reference until it is done."""
    task = asyncio.create_task(coro)
    tasks.add(task)
    task.add_done_callback(tasks.discard)
    return task


async def _select(widget: WeatherWidget, index: int) -> None:
    """Select a suggestion, ignoring indexes the dropdown no longer has."""
    try:
        await widget.select_suggestion(index)
    except IndexError:
        logger.warning("widget_select_out_of_range", index=index)


async def _cancel_actions(tasks: set[asyncio.Task]) -> None:
    """Cancel background actions and wait for them to finish."""
    if not tasks:
        return
    pending = list(tasks)
    for task in pending:
        task.cancel()
    results = await asyncio.gather(*pending, return_exceptions=True)
    for result in results:
        if isinstance(result, Exception):
            logger.warning(
                "widget_action_failed",
                error=str(result),
                error_type=type(result).__name__,
            )


def _dispatch(widget: WeatherWidget, event: WidgetEvent, tasks: set[asyncio.Task]) -> None:
    if event.type == "input":
        widget.on_input(event.text or "")
    elif event.type == "focus":
        widget.focus()
    elif event.type == "blur":
        widget.blur()
    elif event.type == "submit":
        _track(tasks, widget.submit())
    elif event.type == "select":
        if event.index is None:
            logger.warning("widget_select_missing_index")
            return
        _track(tasks, _select(widget, event.index))


@router.websocket("/ws/widget")
async def widget_session(
    websocket: WebSocket,
    service: WeatherService = Depends(get_weather_service),
) -> None:
    """Drive one WeatherWidget from a client connection."""
    await websocket.accept()

    widget = WeatherWidget(service)
    updates: asyncio.Queue[WidgetSnapshot] = asyncio.Queue()
    unsubscribe = widget.state.subscribe(lambda: updates.put_nowait(widget.snapshot()))
    updates.put_nowait(widget.snapshot())

    sender = asyncio.create_task(_send_snapshots(websocket, updates))
    actions: set[asyncio.Task] = set()
    _track(actions, widget.start())
    logger.info("widget_connected")

    try:
        while True:
            try:
                event = WidgetEvent.model_validate(await websocket.receive_json())
            except ValueError as e:
                logger.warning("widget_event_invalid", error=str(e))
                continue
            _dispatch(widget, event, actions)
    except WebSocketDisconnect:
        logger.info("widget_disconnected")
    finally:
        unsubscribe()
        await _cancel_actions(actions)
        await widget.close()
        sender.cancel()
        try:
            await sender
        except asyncio.CancelledError:
            pass
        except Exception as e:
            logger.debug("widget_sender_stopped", error=str(e))
