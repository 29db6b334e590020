from typing import Any, Dict, Literal, Optional, Protocol

from langgraph.graph import END, START, StateGraph

from registration.errors import RegistrationError
from registration.schema import Registration, RegistrationDraft
from registration.state import SubmissionState
from registration.validator import RegistrationValidator


class RegistrationWriter(Protocol):
    async def create(self, draft: RegistrationDraft) -> Registration: ...

    async def update(self, registration_id: str, draft: RegistrationDraft) -> Registration: ...


class SubmissionGraphFactory:
    """
    validate -> blocked | create | update -> END

    Nothing reaches the backend unless the validator returned no errors.
    """

    def __init__(self, validator: RegistrationValidator, writer: RegistrationWriter):
        self.validator = validator
        self.writer = writer

    def validate_node(self, state: SubmissionState) -> Dict[str, Any]:
        return {"errors": self.validator.validate(state.draft)}

    @staticmethod
    def route(state: SubmissionState) -> Literal["blocked", "create", "update"]:
        if state.errors:
            return "blocked"
        return "update" if state.registration_id else "create"

    @staticmethod
    def blocked_node(state: SubmissionState) -> Dict[str, Any]:
        return {"outcome": "blocked"}

    async def create_node(self, state: SubmissionState) -> Dict[str, Any]:
        try:
            saved = await self.writer.create(state.draft)
        except RegistrationError as e:
            return {"outcome": "failed", "failure": e}
        return {"outcome": "saved", "saved": saved}

    async def update_node(self, state: SubmissionState) -> Dict[str, Any]:
        try:
            saved = await self.writer.update(state.registration_id, state.draft)
        except RegistrationError as e:
            return {"outcome": "failed", "failure": e}
        return {"outcome": "saved", "saved": saved}

    def build(self) -> StateGraph:
        g = StateGraph(SubmissionState)

        g.add_node("validate", self.validate_node)
        g.add_node("blocked", self.blocked_node)
        g.add_node("create", self.create_node)
        g.add_node("update", self.update_node)

        g.add_edge(START, "validate")
        g.add_conditional_edges(
            "validate",
            self.route,
            {"blocked": "blocked", "create": "create", "update": "update"},
        )
        g.add_edge("blocked", END)
        g.add_edge("create", END)
        g.add_edge("update", END)

        return g

    def compile(self):
        return self.build().compile()


async def run_submission(graph: Any, draft: RegistrationDraft, registration_id: Optional[str]) -> SubmissionState:
    result = await graph.ainvoke({"draft": draft, "registration_id": registration_id})
    if isinstance(result, SubmissionState):
        return result
    return SubmissionState.model_validate(result)
