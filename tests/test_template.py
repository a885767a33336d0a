import pytest

from diego.template import TemplateFlag, TemplateSchema, UnsupportedTypeError, render


def _example_schema():
    flags = [
        ("color", "enable ANSI colors in CLI output", "bool"),
        ("verbose", "enable verbose logging", "bool"),
        ("file", "path of file to process", "string"),
        ("workers", "number of workers to use in parallel", "int"),
        ("read-only", "do not write output to file", "bool"),
    ]
    return TemplateSchema(
        package="main",
        struct_name="ExampleVars",
        source="./args.json",
        flags=[TemplateFlag(n, d, t, "EXAMPLE") for n, d, t in flags],
        prefix="EXAMPLE",
    )


EXPECTED_JSON_OUTPUT = """\
// Code generated by diego; DO NOT EDIT.

package main

import (
\t"errors"
\t"flag"
\t"fmt"
\t"os"
\t"strconv"
\t"strings"
)

// Parse initializes the ExampleVars from command-line and environment
// variables. Typically args should be os.Args[1:]; do not include the
// executable name.
func (base *ExampleVars) Parse(args []string) error {
\treturn errors.Join(
\t\tbase.foldEnv(),
\t\tbase.foldArgs(args),
\t)
}

func (base *ExampleVars) foldEnv() error {
\tvar err error
\terr = errors.Join(err, lookupBool(&base.Color, "EXAMPLE_COLOR"))
\terr = errors.Join(err, lookupBool(&base.Verbose, "EXAMPLE_VERBOSE"))
\tlookupString(&base.File, "EXAMPLE_FILE")
\terr = errors.Join(err, lookupInt(&base.Workers, "EXAMPLE_WORKERS"))
\terr = errors.Join(err, lookupBool(&base.ReadOnly, "EXAMPLE_READ_ONLY"))
\treturn err
}

func (base *ExampleVars) foldArgs(args []string) error {
\tfs := flag.NewFlagSet("EXAMPLE", flag.ExitOnError)
\tfs.BoolVar(&base.Color, "color", base.Color, "enable ANSI colors in CLI output [EXAMPLE_COLOR]")
\tfs.BoolVar(&base.Verbose, "verbose", base.Verbose, "enable verbose logging [EXAMPLE_VERBOSE]")
\tfs.StringVar(&base.File, "file", base.File, "path of file to process [EXAMPLE_FILE]")
\tfs.IntVar(&base.Workers, "workers", base.Workers, "number of workers to use in parallel [EXAMPLE_WORKERS]")
\tfs.BoolVar(&base.ReadOnly, "read-only", base.ReadOnly, "do not write output to file [EXAMPLE_READ_ONLY]")
\tif err := fs.Parse(args); err != nil {
\t\treturn fmt.Errorf("failed to parse command line args: %w", err)
\t}
\treturn nil
}

// lookupString in environment; write to target if it's set.
func lookupString(target *string, name string) {
\tread, ok := os.LookupEnv(name)
\tif ok {
\t\t*target = read
\t}
}

// lookupInt in environment; write to target if it's set and parseable as a
// decimal int.
func lookupInt(target *int, name string) error {
\traw, ok := os.LookupEnv(name)
\tif !ok {
\t\treturn nil
\t}
\tparsed, err := strconv.Atoi(raw)
\tif err != nil {
\t\treturn fmt.Errorf("error parsing int environment variable '%s': %w", name, err)
\t}
\t*target = parsed
\treturn nil
}

// lookupBool in environment; write to target if it's set.
func lookupBool(target *bool, name string) error {
\traw, ok := os.LookupEnv(name)
\tif !ok {
\t\treturn nil
\t}
\ttruthiness := raw != "" && strings.ToLower(raw) != "false"
\t*target = truthiness
\treturn nil
}

// ExampleVars generated from ./args.json.
type ExampleVars struct {
\t// --color: enable ANSI colors in CLI output
\tColor bool `json:"color,omitempty"`
\t// --verbose: enable verbose logging
\tVerbose bool `json:"verbose,omitempty"`
\t// --file: path of file to process
\tFile string `json:"file,omitempty"`
\t// --workers: number of workers to use in parallel
\tWorkers int `json:"workers,omitempty"`
\t// --read-only: do not write output to file
\tReadOnly bool `json:"read-only,omitempty"`
}
"""


def test_render_json_example_matches_generated_file():
    assert render(_example_schema(), include_struct=True) == EXPECTED_JSON_OUTPUT


def test_render_without_struct_is_prefix_of_full_output():
    base = render(_example_schema(), include_struct=False)
    assert "type ExampleVars struct" not in base
    assert EXPECTED_JSON_OUTPUT.startswith(base)
    assert base.endswith("\treturn nil\n}\n")


def test_go_name_and_env_var():
    flag = TemplateFlag("read-only", "do not write output to file", "bool", "EXAMPLE")
    assert flag.go_name() == "ReadOnly"
    assert flag.env_var() == "EXAMPLE_READ_ONLY"


@pytest.mark.parametrize(
    "go_type, expected",
    [
        ("string", 'lookupString(&base.File, "EXAMPLE_FILE")'),
        ("int", 'err = errors.Join(err, lookupInt(&base.File, "EXAMPLE_FILE"))'),
        ("bool", 'err = errors.Join(err, lookupBool(&base.File, "EXAMPLE_FILE"))'),
    ],
)
def test_env_lookup(go_type, expected):
    assert TemplateFlag("file", "", go_type, "EXAMPLE").env_lookup("err") == expected


@pytest.mark.parametrize(
    "go_type, expected",
    [("string", "StringVar"), ("int", "IntVar"), ("bool", "BoolVar")],
)
def test_flag_var(go_type, expected):
    assert TemplateFlag("file", "", go_type, "EXAMPLE").flag_var() == expected


def test_unsupported_type_raises():
    flag = TemplateFlag("ratio", "", "float64", "EXAMPLE")
    with pytest.raises(UnsupportedTypeError):
        flag.flag_var()
    with pytest.raises(UnsupportedTypeError):
        flag.env_lookup("err")
    with pytest.raises(UnsupportedTypeError):
        render(TemplateSchema("main", "ExampleVars", flags=[flag], prefix="EXAMPLE"))


def test_render_string_only_schema_keeps_err_declaration():
    schema = TemplateSchema(
        package="main",
        struct_name="DiegoVars",
        flags=[TemplateFlag("json-file", "relative path", "string", "DIEGO")],
        prefix="DIEGO",
    )
    output = render(schema)
    assert '\tlookupString(&base.JsonFile, "DIEGO_JSON_FILE")\n' in output
    assert '\tfs := flag.NewFlagSet("DIEGO", flag.ExitOnError)\n' in output
    assert "\tvar err error\n" in output


def test_render_escapes_quotes_in_usage():
    schema = TemplateSchema(
        package="main",
        struct_name="ExampleVars",
        flags=[TemplateFlag("file", 'the "input"', "string", "EXAMPLE")],
        prefix="EXAMPLE",
    )
    assert '"the \\"input\\" [EXAMPLE_FILE]")' in render(schema)