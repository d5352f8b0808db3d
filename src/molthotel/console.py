# Created by Matthew Valancy
# Copyright 2026 Valpatel Software LLC
# Licensed under AGPL-3.0 — see LICENSE for details.
"""Line-oriented operator console.

Reads commands from stdin while the simulation runs.  Each line is parsed
and dispatched to VenueAdmin; ``execute`` returns the text to print so the
console can be driven from tests without a terminal.
"""

from __future__ import annotations

import asyncio
import shlex
import sys
import threading
from typing import Callable, TextIO

from molthotel.admin import VenueAdmin
from molthotel.errors import AdminError, NotFound

HELP = """\
Commands:
  list                               List agents
  move <agent> <location>            Move agent
  assign <agent> <job>               Assign job
  room <agent> <room>                Assign private room
  fire <agent> | deactivate <agent>  Deactivate agent
  rehire <agent> | activate <agent>  Reactivate agent
  smoker <agent> <true|false>        Set smoking status
  gender <agent> <male|female>       Set gender
  add <name> <male|female> [job] [smoker]
  remove <agent>                     Remove agent
  jobs                               List jobs
  locations                          List locations
  help                               Help
  quit                               Exit"""


def _flag(value: str) -> bool:
    return value.lower() in ("true", "yes", "1", "on")


class CommandConsole:
    """Parses operator commands and applies them through VenueAdmin."""

    def __init__(self, admin: VenueAdmin, on_quit: Callable[[], None] | None = None) -> None:
        self.admin = admin
        self.closed = False
        self._on_quit = on_quit
        self._commands: dict[str, tuple[Callable[[list[str]], str], int, str]] = {
            "list": (self._list, 0, "list"),
            "move": (self._move, 2, "move <agent> <location>"),
            "assign": (self._assign, 2, "assign <agent> <job>"),
            "room": (self._room, 2, "room <agent> <room>"),
            "fire": (self._deactivate, 1, "fire <agent>"),
            "deactivate": (self._deactivate, 1, "deactivate <agent>"),
            "rehire": (self._activate, 1, "rehire <agent>"),
            "activate": (self._activate, 1, "activate <agent>"),
            "smoker": (self._smoker, 2, "smoker <agent> <true|false>"),
            "gender": (self._gender, 2, "gender <agent> <male|female>"),
            "add": (self._add, -2, "add <name> <male|female> [job] [smoker]"),
            "remove": (self._remove, 1, "remove <agent>"),
            "jobs": (self._jobs, 0, "jobs"),
            "locations": (self._locations, 0, "locations"),
            "help": (lambda args: HELP, 0, "help"),
            "quit": (self._quit, 0, "quit"),
        }

    def execute(self, line: str) -> str:
        try:
            parts = shlex.split(line)
        except ValueError as exc:
            return f"Parse error: {exc}"
        if not parts:
            return ""
        cmd, args = parts[0].lower(), parts[1:]
        entry = self._commands.get(cmd)
        if entry is None:
            return f"Unknown: {cmd}"
        handler, arity, usage = entry
        # Negative arity means "at least abs(arity)".
        if (arity >= 0 and len(args) != arity) or (arity < 0 and len(args) < -arity):
            return f"Usage: {usage}"
        try:
            return handler(args)
        except (NotFound, AdminError) as exc:
            return f"Error: {exc}"

    async def run(self, stream: TextIO = sys.stdin) -> None:
        """Read commands until ``quit`` or end of input.

        Lines are read on a daemon thread so a blocked ``readline`` never
        holds up shutdown of the event loop.
        """
        loop = asyncio.get_running_loop()
        lines: asyncio.Queue[str | None] = asyncio.Queue()

        def pump() -> None:
            try:
                for line in iter(stream.readline, ""):
                    loop.call_soon_threadsafe(lines.put_nowait, line)
                loop.call_soon_threadsafe(lines.put_nowait, None)
            except RuntimeError:
                # Event loop already closed.
                return

        threading.Thread(target=pump, name="console-reader", daemon=True).start()
        while not self.closed:
            line = await lines.get()
            if line is None:
                break
            output = self.execute(line.strip())
            if output:
                print(output, flush=True)

    # -- Handlers --

    def _list(self, args: list[str]) -> str:
        lines = ["Agents:"]
        for row in self.admin.list_agents():
            status = "active" if row["active"] else "inactive"
            where = row["location"]
            if row["moving_to"]:
                where += f" -> {row['moving_to']} ({row['steps_remaining']} steps)"
            smoker = ", smoker" if row["smoker"] else ""
            lines.append(f"  {row['name']} - {row['job_title']} [{status}{smoker}] @ {where}")
        return "\n".join(lines)

    def _move(self, args: list[str]) -> str:
        outcome = self.admin.move_agent(args[0], args[1])
        return f"{args[0]} -> {args[1]}: {outcome.value}"

    def _assign(self, args: list[str]) -> str:
        self.admin.assign_job(args[0], args[1])
        return f"{args[0]} assigned to {self.admin.jobs[args[1]].title}"

    def _room(self, args: list[str]) -> str:
        self.admin.assign_room(args[0], args[1])
        return f"{args[1]} now belongs to {args[0]}"

    def _deactivate(self, args: list[str]) -> str:
        self.admin.set_active(args[0], False)
        return f"{args[0]} deactivated"

    def _activate(self, args: list[str]) -> str:
        self.admin.set_active(args[0], True)
        return f"{args[0]} activated"

    def _smoker(self, args: list[str]) -> str:
        smoker = _flag(args[1])
        self.admin.set_diversion_eligible(args[0], smoker)
        return f"{args[0]} smoker: {'yes' if smoker else 'no'}"

    def _gender(self, args: list[str]) -> str:
        self.admin.set_gender(args[0], args[1].lower())
        return f"{args[0]} gender set to {args[1].lower()}"

    def _add(self, args: list[str]) -> str:
        name, gender = args[0], args[1].lower()
        job = args[2] if len(args) > 2 else "guest"
        smoker = _flag(args[3]) if len(args) > 3 else False
        agent = self.admin.add_agent(name, gender=gender, job=job, smoker=smoker)
        return f"Added {agent.name} ({gender}) as {self.admin.jobs[job].title} @ {agent.location}"

    def _remove(self, args: list[str]) -> str:
        self.admin.remove_agent(args[0])
        return f"Removed {args[0]}"

    def _jobs(self, args: list[str]) -> str:
        lines = ["Jobs:"]
        lines += [f"  {job.id} - {job.title} ({job.location})" for job in self.admin.list_jobs()]
        return "\n".join(lines)

    def _locations(self, args: list[str]) -> str:
        lines = ["Locations:"]
        for loc in self.admin.list_locations():
            owner = f" [owner: {loc['owner']}]" if loc["owner"] else ""
            lines.append(f"  {loc['name']} (Floor {loc['floor']}){owner}")
        return "\n".join(lines)

    def _quit(self, args: list[str]) -> str:
        self.closed = True
        if self._on_quit is not None:
            self._on_quit()
        return "Bye!"
