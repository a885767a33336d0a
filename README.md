# diego

`diego` writes Go code that parses a set of flags from both the environment
and the command line. You describe the flags once, and `diego` renders a
`Parse(args []string) error` method for a Go struct. Each flag `--some-name`
is also read from the environment variable `PREFIX_SOME_NAME`. Values given
on the command line take precedence over values from the environment.

## Installation

```
pip install .
```

This installs the `diego` command. The package has no runtime dependencies.

## Describing flags

You can describe the flags in two ways.

### From a JSON schema

The schema file may contain `//` and `/* */` comments and trailing commas:

```jsonc
{
  // Environment variables are named EXAMPLE_<FLAG>.
  "environmentPrefix": "example",
  "flags": [
    {"name": "color", "type": "bool", "description": "enable ANSI colors in CLI output"},
    {"name": "file", "type": "string", "description": "path of file to process"},
    {"name": "workers", "type": "int", "description": "number of workers to use in parallel"},
  ],
}
```

Run:

```
diego --json-file ./args.json
```

This writes `./args.json.go` in package `main`. The file defines the struct
`ExampleVars`, which is the prefix in title case followed by `Vars`, and its
parsing code. The prefix may hold only letters, digits and `_`. It is
upper-cased to build the environment variable names.

### From an existing struct

Give each field a `// --name: description` doc comment and a `json` tag that
names the flag:

```go
type ExampleVars struct {
	// --color: enable ANSI colors in CLI output
	Color bool `json:"color,omitempty"`
	// --workers: number of workers to use in parallel
	Workers int `json:"workers,omitempty"`
}
```

Set `GOFILE` to the file that holds the struct and `GOPACKAGE` to its package,
as `go generate` does. Then run:

```
diego --struct-type=ExampleVars
```

This writes `<file>_args.go`. For example, `main.go` gives `main_args.go`.
The environment prefix is the struct name without a trailing `Vars`,
upper-cased. If that name is not a valid prefix, `diego` prints a message and
uses an empty prefix.

### Options

`--json-file` and `--struct-type` can also be set through `DIEGO_JSON_FILE`
and `DIEGO_STRUCT_TYPE`. You must give exactly one of them. If an error
occurs, `diego` prints a message to standard error and exits with status 1.
`-h` or `--help` prints the usage.

## Supported types

Only `bool`, `int` and `string` are supported. Environment values are read
as follows:

- `string`: taken as is, even when empty.
- `int`: must be a decimal integer. Any other value is an error.
- `bool`: an empty value or `false` (in any letter case) is false. Anything else is true.

## Using the library

The same building blocks can be used from Python. The functions
`diego.runtime.parse_vars` and `diego.template.render` take a
`TemplateSchema`. You can build one from a JSON source:

```python
from diego.cli import load_json_source
from diego.runtime import parse_vars
from diego.template import render

prepared = load_json_source("args.json").prepare_schema()
values = parse_vars(prepared, ["--workers=4"], {"EXAMPLE_COLOR": "true"})
# {'color': True, 'file': '', 'workers': 4}

go_code = render(prepared, include_struct=True)
```

`parse_vars` raises `ArgsParseError` when a value cannot be parsed. The error
has a `values` attribute that holds whatever was parsed.

The other modules cover the remaining steps:

- `diego.names`: `validate_prefix`, `build_env_var` and `build_go_name`.
- `diego.env`: `lookup_string`, `lookup_int` and `lookup_bool`.
- `diego.schema`: `load_schema`, `Schema.from_dict` and `standardize_jsonc`.
- `diego.go_source`: `from_go_source` and `parse_description`.

## Limitations

- `diego` does not use a Go parser to read a Go file. `from_go_source` scans
  the text for the package clause and the named struct. It reads one field
  per line, so unusual layouts may not be recognised.
- The generated code is not passed through `gofmt`. It is written already laid out.
- Code generated from a JSON schema always uses package `main`.