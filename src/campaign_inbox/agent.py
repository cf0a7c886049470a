"""Campaign email agent: an LLM with the Gmail/Calendar tools in a LangGraph loop."""

from __future__ import annotations

import logging
import os
import uuid
from functools import lru_cache
from typing import Any, Literal, Sequence

from langchain_core.messages import AIMessage, HumanMessage, RemoveMessage
from langchain_core.tools import BaseTool, ToolException
from langgraph.graph import END, START, StateGraph

from campaign_inbox.checkpointing import get_sqlite_checkpointer
from campaign_inbox.configuration import format_model_identifier, get_llm
from campaign_inbox.prompts import CAMPAIGN_LABEL, DEFAULT_EVENT_TIMEZONE, agent_system_prompt
from campaign_inbox.runtime import DEFAULT_MAX_STEPS
from campaign_inbox.schemas import AgentState
from campaign_inbox.tools import get_tools, get_tools_by_name
from campaign_inbox.tools.prompt_templates import CAMPAIGN_TOOLS_PROMPT
from campaign_inbox.tracing import summarize_tool_call_for_grid, trace_stage
from campaign_inbox.utils import extract_message_content

logger = logging.getLogger(__name__)

AGENT_NAME = "Campaign Email Agent"
STEP_BUDGET_EXHAUSTED = "Stopped after reaching the step limit before the agent produced a final report."
# Earlier-run messages (user requests and final answers) recalled per thread
HISTORY_LIMIT = 10


def build_system_prompt(timezone: str = DEFAULT_EVENT_TIMEZONE) -> str:
    return agent_system_prompt.format(
        tools_prompt=CAMPAIGN_TOOLS_PROMPT,
        label=CAMPAIGN_LABEL,
        timezone=timezone,
    )


def _is_conversation_turn(message: Any) -> bool:
    if isinstance(message, HumanMessage):
        return True
    return (
        isinstance(message, AIMessage)
        and not message.tool_calls
        and bool(extract_message_content(message))
    )


def select_history(messages: Sequence[Any], limit: int = HISTORY_LIMIT) -> list:
    """Return the newest `limit` user requests and final agent answers.

    Tool calls and observations from earlier runs are not recalled, so the
    kept history never starts with an orphaned tool result.
    """

    if limit <= 0:
        return []
    return [m for m in messages if _is_conversation_turn(m)][-limit:]


def build_campaign_agent(
    llm: Any,
    tools: Sequence[BaseTool] | None = None,
    *,
    system_prompt: str | None = None,
    checkpointer: Any = None,
    history_limit: int = HISTORY_LIMIT,
):
    """
    Compile the `load_history -> llm_call -> environment -> llm_call` loop for the given chat model.

    Parameters:
        llm: A LangChain chat model supporting `bind_tools`.
        tools: Tools to expose; defaults to every Gmail and Calendar tool.
        system_prompt: Overrides the default campaign instructions.
        checkpointer: Persists the conversation per `thread_id`; without one
            every run starts from an empty history.
        history_limit: Earlier user requests and final answers kept per thread.

    Returns:
        The compiled LangGraph agent. Its input state carries `messages` and an
        optional `max_steps` budget on LLM turns.
    """

    tools = list(tools) if tools is not None else get_tools()
    tools_by_name = get_tools_by_name(tools)
    llm_with_tools = llm.bind_tools(tools)
    system_msg = {"role": "system", "content": system_prompt or build_system_prompt()}

    def load_history(state: AgentState):
        """Drop earlier-run messages outside the recalled history window."""
        *earlier, _request = state["messages"]
        keep = {id(m) for m in select_history(earlier, history_limit)}
        stale = [RemoveMessage(id=m.id) for m in earlier if id(m) not in keep and m.id]
        if earlier:
            logger.info(
                "%s recalled %d earlier message(s)",
                AGENT_NAME,
                len(earlier) - len(stale),
            )
        return {"messages": stale} if stale else {}

    def llm_call(state: AgentState):
        """LLM decides whether to call a tool or to answer."""
        msg = llm_with_tools.invoke([system_msg] + state["messages"])
        steps = state.get("steps", 0) + 1
        logger.info(
            "%s step %d: %d tool call(s)",
            AGENT_NAME,
            steps,
            len(getattr(msg, "tool_calls", None) or []),
        )
        return {"messages": [msg], "steps": steps}

    def tool_node(state: AgentState):
        """
        Execute each tool call in the last message and return the observations.

        Exceptions raised by tools become `Error: ...` observations so the model
        can decide how to continue; the failure is already logged by the tool.
        """

        result = []
        for tool_call in state["messages"][-1].tool_calls:
            name = tool_call["name"]
            with trace_stage(
                name,
                run_type="tool",
                inputs_summary=summarize_tool_call_for_grid(name, tool_call["args"]),
            ) as handle:
                tool = tools_by_name.get(name)
                if tool is None:
                    observation = f"Error: unknown tool '{name}'"
                else:
                    try:
                        observation = tool.invoke(tool_call["args"])
                    except ToolException as exc:
                        observation = f"ToolException: {exc}"
                    except Exception as exc:  # noqa: BLE001 - surface tool errors to the model
                        observation = f"Error: {exc.__class__.__name__}: {exc}"
                if handle is not None:
                    handle.set_outputs(str(observation))
            result.append(
                {"role": "tool", "content": str(observation), "tool_call_id": tool_call["id"]}
            )
        return {"messages": result}

    def should_continue(state: AgentState) -> Literal["Action", "__end__"]:
        """Route to Action while the model asks for tools and the step budget allows."""
        last_message = state["messages"][-1]
        if not getattr(last_message, "tool_calls", None):
            return END
        budget = state.get("max_steps") or DEFAULT_MAX_STEPS
        if state.get("steps", 0) >= budget:
            logger.warning("%s reached its step budget (%d)", AGENT_NAME, budget)
            return END
        return "Action"

    agent_builder = StateGraph(AgentState)
    agent_builder.add_node("load_history", load_history)
    agent_builder.add_node("llm_call", llm_call)
    agent_builder.add_node("environment", tool_node)
    agent_builder.add_edge(START, "load_history")
    agent_builder.add_edge("load_history", "llm_call")
    agent_builder.add_conditional_edges(
        "llm_call",
        should_continue,
        {
            "Action": "environment",
            END: END,
        },
    )
    agent_builder.add_edge("environment", "llm_call")
    return agent_builder.compile(checkpointer=checkpointer)


def run_campaign_agent(
    agent,
    prompt: str,
    *,
    max_steps: int = DEFAULT_MAX_STEPS,
    thread_id: str | None = None,
) -> str:
    """
    Invoke the compiled agent with a single user prompt and return its final text.

    Runs sharing a `thread_id` share conversation history when the agent was
    compiled with a checkpointer; a fresh thread is used when none is given.
    """

    thread_id = thread_id or f"campaign-agent-{uuid.uuid4()}"
    result = agent.invoke(
        {
            "messages": [{"role": "user", "content": prompt}],
            "steps": 0,
            "max_steps": max_steps,
        },
        config={
            "recursion_limit": 2 * max_steps + 6,
            # Root namespace and latest checkpoint, also when called from a workflow task
            "configurable": {"thread_id": thread_id, "checkpoint_ns": "", "checkpoint_id": None},
        },
    )
    messages = result.get("messages") or []
    if not messages:
        return ""
    last = messages[-1]
    if getattr(last, "tool_calls", None):
        return extract_message_content(last) or STEP_BUDGET_EXHAUSTED
    return extract_message_content(last)


@lru_cache(maxsize=1)
def get_campaign_agent():
    """Build the default agent from the configured model, with history kept in the SQLite checkpointer."""

    model_name = os.getenv("CAMPAIGN_INBOX_MODEL")
    llm = get_llm(temperature=0.0, model=model_name)
    logger.info("%s model: %s", AGENT_NAME, format_model_identifier(model_name))
    return build_campaign_agent(llm, checkpointer=get_sqlite_checkpointer())
