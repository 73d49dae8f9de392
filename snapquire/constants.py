"""Named constants — require shapes, tree-sitter node types and the Node.js environment."""

from __future__ import annotations

REQUIRE_IDENTIFIER = "require"
RESOLVE_PROPERTY = "resolve"
ACCESSOR_PREFIX = "get_"

JAVASCRIPT_LANGUAGE = "javascript"

RESOLVE_EXTENSIONS: tuple[str, ...] = (".js", ".json")
PACKAGE_MANIFEST = "package.json"
NODE_MODULES_DIR = "node_modules"
INDEX_BASENAME = "index"
NODE_SCHEME_PREFIX = "node:"

# ── tree-sitter node types ───────────────────────────────────────

PROGRAM_TYPE = "program"
IDENTIFIER_TYPE = "identifier"
SHORTHAND_PROPERTY_TYPE = "shorthand_property_identifier"
CALL_EXPRESSION_TYPE = "call_expression"
MEMBER_EXPRESSION_TYPE = "member_expression"
VARIABLE_DECLARATOR_TYPE = "variable_declarator"
LEXICAL_DECLARATION_TYPE = "lexical_declaration"
CATCH_CLAUSE_TYPE = "catch_clause"

LITERAL_TYPES: frozenset[str] = frozenset(
    {"string", "number", "true", "false", "null", "regex"}
)

FUNCTION_EXPRESSION_TYPES: frozenset[str] = frozenset({"function", "function_expression"})

FUNCTION_DECLARATION_TYPES: frozenset[str] = frozenset(
    {"function_declaration", "generator_function_declaration"}
)

FUNCTION_SCOPE_TYPES: frozenset[str] = frozenset(
    {
        "function",
        "function_expression",
        "function_declaration",
        "generator_function",
        "generator_function_declaration",
        "arrow_function",
        "method_definition",
    }
)

SCOPE_TYPES: frozenset[str] = FUNCTION_SCOPE_TYPES | {PROGRAM_TYPE, CATCH_CLAUSE_TYPE}

STATEMENT_BLOCK_TYPE = "statement_block"
FOR_IN_STATEMENT_TYPE = "for_in_statement"

# Open a block scope for let/const/class; a function or catch body shares its owner's scope.
BLOCK_SCOPE_TYPES: frozenset[str] = frozenset(
    {STATEMENT_BLOCK_TYPE, "switch_body", "for_statement", FOR_IN_STATEMENT_TYPE}
)

CLASS_DECLARATION_TYPES: frozenset[str] = frozenset({"class_declaration"})

DESTRUCTURING_TYPES: frozenset[str] = frozenset({"object_pattern", "array_pattern"})

ASSIGNMENT_TYPES: frozenset[str] = frozenset(
    {"assignment_expression", "augmented_assignment_expression"}
)

# Nodes with no counterpart in an ESTree parent chain.
TRANSPARENT_PARENT_TYPES: frozenset[str] = frozenset(
    {"parenthesized_expression", "arguments"}
)

# Containers whose children are statements an accessor can be inserted beside.
STATEMENT_LIST_TYPES: frozenset[str] = frozenset(
    {PROGRAM_TYPE, STATEMENT_BLOCK_TYPE, "switch_case", "switch_default"}
)

# ── Node.js environment ──────────────────────────────────────────

NODE_CORE_MODULES: frozenset[str] = frozenset(
    {
        "assert",
        "assert/strict",
        "async_hooks",
        "buffer",
        "child_process",
        "cluster",
        "console",
        "constants",
        "crypto",
        "dgram",
        "diagnostics_channel",
        "dns",
        "dns/promises",
        "domain",
        "events",
        "fs",
        "fs/promises",
        "http",
        "http2",
        "https",
        "inspector",
        "module",
        "net",
        "os",
        "path",
        "path/posix",
        "path/win32",
        "perf_hooks",
        "process",
        "punycode",
        "querystring",
        "readline",
        "repl",
        "stream",
        "stream/promises",
        "string_decoder",
        "sys",
        "timers",
        "timers/promises",
        "tls",
        "trace_events",
        "tty",
        "url",
        "util",
        "util/types",
        "v8",
        "vm",
        "wasi",
        "worker_threads",
        "zlib",
    }
)

GLOBALS: frozenset[str] = frozenset(
    {
        # ECMAScript
        "Array",
        "ArrayBuffer",
        "Atomics",
        "BigInt",
        "BigInt64Array",
        "BigUint64Array",
        "Boolean",
        "DataView",
        "Date",
        "Error",
        "EvalError",
        "FinalizationRegistry",
        "Float32Array",
        "Float64Array",
        "Function",
        "Infinity",
        "Int8Array",
        "Int16Array",
        "Int32Array",
        "Intl",
        "JSON",
        "Map",
        "Math",
        "NaN",
        "Number",
        "Object",
        "Promise",
        "Proxy",
        "RangeError",
        "ReferenceError",
        "Reflect",
        "RegExp",
        "Set",
        "SharedArrayBuffer",
        "String",
        "Symbol",
        "SyntaxError",
        "TypeError",
        "URIError",
        "Uint8Array",
        "Uint8ClampedArray",
        "Uint16Array",
        "Uint32Array",
        "WeakMap",
        "WeakRef",
        "WeakSet",
        "decodeURI",
        "decodeURIComponent",
        "encodeURI",
        "encodeURIComponent",
        "escape",
        "eval",
        "globalThis",
        "isFinite",
        "isNaN",
        "parseFloat",
        "parseInt",
        "undefined",
        "unescape",
        # Node.js
        "Buffer",
        "TextDecoder",
        "TextEncoder",
        "URL",
        "URLSearchParams",
        "WebAssembly",
        "__dirname",
        "__filename",
        "clearImmediate",
        "clearInterval",
        "clearTimeout",
        "console",
        "exports",
        "global",
        "module",
        "process",
        "queueMicrotask",
        "require",
        "setImmediate",
        "setInterval",
        "setTimeout",
    }
)
