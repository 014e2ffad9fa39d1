# runtimeguard

Components for a runtime security monitor, usable as a library.

## Modules

- `runtimeguard.indexed_vector.IndexedVector` — an ordered collection whose
  entries can be reached by position or by a unique string key. `insert(entry,
  index)` appends under a new key or overwrites in place under an existing one
  and returns the position; `at(key)` takes a position or a key and returns
  `None` when nothing is there.
- `runtimeguard.rules`
  - `Rule` — a dataclass with `id`, `source`, `name`, `description`,
    `output`, `tags`, `exception_fields` and `priority`.
  - `Condition` — wraps a predicate over an event together with the set of
    event types it can match.
  - `FilterRuleset` — holds rules and, for each ruleset id, which of them are
    enabled. Rules are enabled or disabled by name (`enable`, `disable`, exact
    or substring match; an empty string matches every rule) or by tag
    (`enable_tags`, `disable_tags`). `run(event, ruleset_id)` returns the first
    enabled rule whose condition matches the event, or `None`;
    `enabled_count` and `enabled_evttypes` report on a ruleset.
  - `FilterRulesetFactory` — creates new, independent rulesets.
  - `Source` — a named data source with its ruleset and factories;
    `is_field_defined(field)` asks the source's filter factory for the field.
  - `ENGINE_VERSION` and `FIELDS_CHECKSUM` constants.
- `runtimeguard.outputs` — `OutputConfig`, `Message` and alert outputs:
  - `StdoutOutput` writes each message as a line to standard output, flushing
    after each one when not buffered.
  - `ProgramOutput` starts the shell command in the `program` option and
    writes each message as a line to its standard input. Unless the
    `keep_alive` option is `"true"`, the command is closed after every
    message.
  - `SyslogOutput` sends each message to syslog at the message's priority.
- `runtimeguard.response_queue` — `ResponseQueue`, a first-in first-out queue
  with `push` and `try_pop`, and `get_queue()`, which always returns the same
  shared instance.
- `runtimeguard.watchdog.Watchdog` — a background thread that calls a callback
  with the payload of the last `set_timeout(seconds, payload)` once its
  deadline passes; `cancel_timeout()` disarms it. Usable as a context manager,
  which stops the thread on exit.
- `runtimeguard.stats_writer.StatsFileWriter` — appends capture statistics,
  taken from an inspector's `get_capture_stats()`, to a file as JSON-like
  lines. A timer marks a sample as due every `interval_msec` milliseconds and
  `handle()` writes it; `request_sample()` marks one as due by hand.
  Environment entries named `FALCO_STATS_EXTRA_<key>` are added to every
  sample. Raises `StatsWriterError` on a malformed environment entry.

## Installation

```
pip install .
```

## Examples

```python
from runtimeguard.outputs import Message, OutputConfig, StdoutOutput

out = StdoutOutput(OutputConfig(name="stdout"), buffered=False,
                   hostname="host", json_output=False)
out.output(Message(ts=0, priority=4, msg="Sensitive file opened"))
out.cleanup()
```

```python
from runtimeguard.rules import FilterRuleset, Rule

ruleset = FilterRuleset()
ruleset.add(Rule(name="one_rule", tags={"some_tag"}), lambda evt: evt == "open")
ruleset.enable_tags({"some_tag"}, 0)
assert ruleset.enabled_count(0) == 1
assert ruleset.run("open", 0).name == "one_rule"
```

```python
from runtimeguard.watchdog import Watchdog

with Watchdog() as dog:
    dog.start(lambda payload: print("timed out:", payload), 0.05)
    dog.set_timeout(0.2, "event 42")
```

## What it does not do

The package has no command-line program, no event capture of its own, no
rule-file loader and no HTTP server, health endpoint or streaming API. Events,
conditions and capture statistics are supplied by the caller.

## Running the tests

```
pip install .[test]
pytest
```