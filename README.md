# vibestation

vibestation runs data through a pipeline of transforms. Each transform takes
a message, changes it (or reads from it) and hands one or more messages on to
the next transform. Pipelines are described in a short line-oriented script
language, either on its own or embedded in a YAML file.

## Installation

```
pip install .
```

To run the test suite:

```
pip install ".[test]"
pytest
```

## Command line

```
vibestation --config pipeline.yaml --input data.json
```

`-config` and `-input` are accepted as well. The configuration file is read
according to its extension:

* `.yaml` / `.yml` – a YAML document whose `transforms` key holds a script;
* `.sub` – a bare script;
* anything else – the format is guessed from the first 1024 bytes: text
  containing `transforms:` and `|` is read as YAML, text containing `(` or
  `=` as a script.

The input file is read as a single message and pushed through the pipeline.
When the pipeline finishes, `Processed N messages` is printed and the command
exits with status 0. Any error is printed to standard error and the exit
status is 1.

## Script language

One statement per line. Blank lines and lines starting with `#` are ignored.

```
# copy a field
$.copy = $.message

# decode a base64 field into another field
$.plain = decode_base64(source=$.encoded)

# move a field: delete it and store its value elsewhere
$.moved = delete($.old)

# print a field
send_stdout(source=$.plain)
```

Statement forms:

* `$.target = $.source` – copy the value at one path to another; `$` on the
  right copies the whole message data. If the source path does not exist,
  the message is left unchanged.
* `$.target = function(args)` – run a transform and store its result at the
  target path.
* `function(args)` – run a transform; for the decoders the result replaces
  the message data.

Arguments are named, `source=$.foo` (quoted values such as `"\n"` are
unescaped), or in the older `key:value` form, where `true`/`false` and
integers are converted. Built-in transforms also accept a single positional
first argument, which must be a path (`$`, `$.foo`) or a nested call; any
other positional argument is an error. Calls to other function names store
positional arguments as `arg0`, `arg1`, ….

A nested call such as `send_stdout(decode_base64($.foo))` is emitted as its
own transform before the call that contains it, and the outer call's
`source` becomes `$.nested_output`.

The script parser is available directly as `vibestation.sublang.parse(text)`
(or `Parser().parse(text)`), which returns a list of dictionaries and raises
`SublangError` on a bad line. `vibestation.cli.configs_from_script(text)`
turns a script into `TransformConfig` objects.

### Paths

* `$` – the whole message data, parsed as JSON;
* `$.a.b`, `$.items[0]` – a field inside the data;
* `meta.$`, `meta.$.a.b` – the same, in the message metadata.

Setting a path creates missing intermediate objects. `vibestation.jsonpath.JSONPath`
offers `get`, `set` and `delete` on raw JSON documents and raises `PathError`
when a path cannot be resolved.

### Transforms

| name              | what it does                                                           |
|-------------------|------------------------------------------------------------------------|
| `decode_base64`   | decodes standard, padded base64                                        |
| `decompress_gzip` | decompresses gzip data                                                 |
| `send_stdout`     | prints the input as a line on standard output; the message passes on   |
| `delete`          | removes a field; its value goes to the target, or to `$.deleted_value` |
| `assign`          | copies a value between paths (the `a = b` form)                        |

`decode_base64`, `decompress_gzip` and `send_stdout` read from `source` when
it is given and exists, and otherwise from the whole message data. Control
messages pass through them untouched.

## YAML configuration

```yaml
transforms: |
  $.plain = decode_base64(source=$.encoded)
  send_stdout(source=$.plain)
```

## Using it from Python

```python
from vibestation.app import Vibestation
from vibestation.cli import configs_from_script
from vibestation.message import Message

configs = configs_from_script("""
$.plain = decode_base64(source=$.encoded)
send_stdout(source=$.plain)
""")

vibe = Vibestation(configs)
results = vibe.transform(Message(b'{"encoded": "aGVsbG8="}'))
print(results[0].get_value("$.plain"))  # hello
```

`Vibestation(transforms, factory=None)` raises `NoTransformsError` when given
no transforms; `factory` replaces `vibestation.pipeline.create_transform` for
building each transform. `vibestation.pipeline.apply(transforms, messages)`
runs messages through any sequence of objects with a `transform(msg)` method.

`Message(data, metadata)` holds raw bytes. `Message.get_value` returns a
`Value`, whose `exists` tells whether the path was found with a non-null
value, and which converts with `str()`, `as_bytes()`, `as_int()`,
`as_float()`, `as_bool()`, `as_list()` and `as_dict()`. `Message.set_value`
and `Message.delete_value` raise `InvalidPathError` for paths that do not
start with `$` or `meta.$`. `Message.as_control()` turns a message into a
control message, which carries no data.

## What it does not do

* The script parser accepts `split_string(...)` and `lowercase_string(...)`,
  but there are no transforms behind those names: building a pipeline that
  uses them raises `TransformError` ("unsupported transform type"). The same
  holds for any other function name not in the table above.
* The right-hand side of `a = b` must be a path. A literal such as
  `$.status = "copied"` parses, but its source is not a path, so it changes
  nothing.