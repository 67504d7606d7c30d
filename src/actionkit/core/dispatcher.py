"""Outgoing messages collected while an action runs."""

from typing import Any

from pydantic import BaseModel, Field


class Message(BaseModel):
    """A single response sent back to the dialogue engine.

    ``kwargs`` holds free-form extension data; it is merged into the top
    level of the serialized message, except for keys naming a message field.
    """

    text: str | None = None
    image: str | None = None
    json_message: dict[str, Any] | None = None
    template: str | None = None
    response: str | None = None
    attachment: str | None = None
    buttons: list[dict[str, Any]] = Field(default_factory=list)
    elements: list[dict[str, Any]] = Field(default_factory=list)
    kwargs: dict[str, Any] = Field(default_factory=dict)

    def with_kwargs(self, **kwargs: Any) -> "Message":
        self.kwargs.update(kwargs)
        return self

    def to_dict(self) -> dict[str, Any]:
        data = self.model_dump(mode="json", exclude={"kwargs"}, exclude_none=True)
        data = {key: value for key, value in data.items() if value not in ([], {})}
        # Extension data never overrides the message fields
        data.update(
            {key: value for key, value in self.kwargs.items() if key not in Message.model_fields}
        )
        return data


class CollectingDispatcher:
    """Buffers the messages uttered during one run."""

    def __init__(self) -> None:
        self.messages: list[Message] = []

    def utter(self, message: Message) -> None:
        """Append a message to the response list."""
        self.messages.append(message)

    def utter_message(
        self,
        text: str | None = None,
        image: str | None = None,
        json_message: dict[str, Any] | None = None,
        template: str | None = None,
        response: str | None = None,
        attachment: str | None = None,
        buttons: list[dict[str, Any]] | None = None,
        elements: list[dict[str, Any]] | None = None,
        **kwargs: Any,
    ) -> Message:
        """Build a message from its parts and append it."""
        message = Message(
            text=text,
            image=image,
            json_message=json_message,
            template=template,
            response=response,
            attachment=attachment,
            buttons=buttons or [],
            elements=elements or [],
            kwargs=kwargs,
        )
        self.utter(message)
        return message

    def clear(self) -> None:
        """Clear the message buffer."""
        self.messages.clear()

    def to_list(self) -> list[dict[str, Any]]:
        return [message.to_dict() for message in self.messages]

    def __len__(self) -> int:
        return len(self.messages)
