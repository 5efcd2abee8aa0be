"""Enumerations for clangengine type-safe constants.

Numeric libclang enumerations use IntEnum so members pass straight through
ctypes prototypes. Python-side states use StrEnum for automatic string
conversion, eliminating boilerplate __str__ methods.

Python 3.13+.
"""

from enum import IntEnum, StrEnum

__all__ = [
    "AccessSpecifier",
    "Availability",
    "CursorKind",
    "Language",
    "MemoryUsage",
    "Severity",
    "TranslationUnitState",
    "VisitDirective",
]


class AccessSpecifier(IntEnum):
    """Accessibility of a C++ AST element."""

    PUBLIC = 1
    PROTECTED = 2
    PRIVATE = 3


class Availability(IntEnum):
    """Availability of an AST element."""

    AVAILABLE = 0
    """The element is available."""

    DEPRECATED = 1
    """The element is available, but has been deprecated."""

    UNAVAILABLE = 2
    """The element is not available and any usage of it will be an error."""

    INACCESSIBLE = 3
    """The element is available but not accessible; usage will be an error."""


class Language(IntEnum):
    """Language used by a declaration."""

    C = 1
    OBJECTIVE_C = 2
    CPP = 3


class Severity(IntEnum):
    """Severity of a compiler diagnostic.

    Ordered, so ``severity >= Severity.ERROR`` selects errors and fatals.
    """

    IGNORED = 0
    """Suppressed (e.g., by a command-line option)."""

    NOTE = 1
    """Attached to the previous non-note diagnostic."""

    WARNING = 2
    """Suspicious code that may or may not be wrong."""

    ERROR = 3
    """Ill-formed code."""

    FATAL = 4
    """Ill-formed code where parser recovery is unlikely to be useful."""


class MemoryUsage(IntEnum):
    """Usage category of a quantity of translation unit memory."""

    AST = 1
    IDENTIFIERS = 2
    SELECTORS = 3
    GLOBAL_CODE_COMPLETION_RESULTS = 4
    SOURCE_MANAGER_CONTENT_CACHE = 5
    AST_SIDE_TABLES = 6
    SOURCE_MANAGER_MALLOC = 7
    SOURCE_MANAGER_MMAP = 8
    EXTERNAL_AST_SOURCE_MALLOC = 9
    EXTERNAL_AST_SOURCE_MMAP = 10
    PREPROCESSOR = 11
    PREPROCESSING_RECORD = 12
    SOURCE_MANAGER_DATA_STRUCTURES = 13
    PREPROCESSOR_HEADER_SEARCH = 14


class VisitDirective(IntEnum):
    """How a cursor visitation proceeds after a callback returns.

    Values match CXChildVisitResult so they can be returned to libclang as-is.
    """

    BREAK = 0
    """Stop the entire walk immediately (no further callbacks)."""

    CONTINUE = 1
    """Continue with the next sibling without descending into this node."""

    RECURSE = 2
    """Descend into this node's children, then continue with siblings."""


class TranslationUnitState(StrEnum):
    """Lifecycle state of a TranslationUnit.

    StrEnum provides automatic string conversion: str(TranslationUnitState.PARSED) == "parsed"
    """

    PARSED = "parsed"
    """Created by parsing a source file or loading an AST file."""

    REPARSED = "reparsed"
    """Re-analyzed in place; handles from earlier generations are stale."""

    SAVED = "saved"
    """Written to an AST file at least once. Same AST as PARSED/REPARSED."""

    DISPOSED = "disposed"
    """Native unit released. No operation is valid."""


class CursorKind(IntEnum):
    """Kind of AST element a cursor references.

    Category predicates (is_declaration, is_expression, ...) ask libclang
    directly so that kinds added by newer library versions are classified
    correctly even though they are missing from this table.

    The predicates are token-free queries over a plain integer. They load
    the library without acquiring an EngineToken and skip the lifetime and
    thread checks of handle methods, so they work with or without a live token.
    """

    UNEXPOSED_DECL = 1
    STRUCT_DECL = 2
    UNION_DECL = 3
    CLASS_DECL = 4
    ENUM_DECL = 5
    FIELD_DECL = 6
    ENUM_CONSTANT_DECL = 7
    FUNCTION_DECL = 8
    VAR_DECL = 9
    PARM_DECL = 10
    OBJC_INTERFACE_DECL = 11
    OBJC_CATEGORY_DECL = 12
    OBJC_PROTOCOL_DECL = 13
    OBJC_PROPERTY_DECL = 14
    OBJC_IVAR_DECL = 15
    OBJC_INSTANCE_METHOD_DECL = 16
    OBJC_CLASS_METHOD_DECL = 17
    OBJC_IMPLEMENTATION_DECL = 18
    OBJC_CATEGORY_IMPL_DECL = 19
    TYPEDEF_DECL = 20
    METHOD = 21
    NAMESPACE = 22
    LINKAGE_SPEC = 23
    CONSTRUCTOR = 24
    DESTRUCTOR = 25
    CONVERSION_FUNCTION = 26
    TEMPLATE_TYPE_PARAMETER = 27
    NON_TYPE_TEMPLATE_PARAMETER = 28
    TEMPLATE_TEMPLATE_PARAMETER = 29
    FUNCTION_TEMPLATE = 30
    CLASS_TEMPLATE = 31
    CLASS_TEMPLATE_PARTIAL_SPECIALIZATION = 32
    NAMESPACE_ALIAS = 33
    USING_DIRECTIVE = 34
    USING_DECLARATION = 35
    TYPE_ALIAS_DECL = 36
    OBJC_SYNTHESIZE_DECL = 37
    OBJC_DYNAMIC_DECL = 38
    ACCESS_SPECIFIER = 39
    OBJC_SUPER_CLASS_REF = 40
    OBJC_PROTOCOL_REF = 41
    OBJC_CLASS_REF = 42
    TYPE_REF = 43
    BASE_SPECIFIER = 44
    TEMPLATE_REF = 45
    NAMESPACE_REF = 46
    MEMBER_REF = 47
    LABEL_REF = 48
    OVERLOADED_DECL_REF = 49
    VARIABLE_REF = 50
    INVALID_FILE = 70
    NO_DECL_FOUND = 71
    NOT_IMPLEMENTED = 72
    INVALID_CODE = 73
    UNEXPOSED_EXPR = 100
    DECL_REF_EXPR = 101
    MEMBER_REF_EXPR = 102
    CALL_EXPR = 103
    OBJC_MESSAGE_EXPR = 104
    BLOCK_EXPR = 105
    INTEGER_LITERAL = 106
    FLOATING_LITERAL = 107
    IMAGINARY_LITERAL = 108
    STRING_LITERAL = 109
    CHARACTER_LITERAL = 110
    PAREN_EXPR = 111
    UNARY_OPERATOR = 112
    ARRAY_SUBSCRIPT_EXPR = 113
    BINARY_OPERATOR = 114
    COMPOUND_ASSIGN_OPERATOR = 115
    CONDITIONAL_OPERATOR = 116
    CSTYLE_CAST_EXPR = 117
    COMPOUND_LITERAL_EXPR = 118
    INIT_LIST_EXPR = 119
    ADDR_LABEL_EXPR = 120
    STMT_EXPR = 121
    GENERIC_SELECTION_EXPR = 122
    GNU_NULL_EXPR = 123
    STATIC_CAST_EXPR = 124
    DYNAMIC_CAST_EXPR = 125
    REINTERPRET_CAST_EXPR = 126
    CONST_CAST_EXPR = 127
    FUNCTIONAL_CAST_EXPR = 128
    TYPEID_EXPR = 129
    BOOL_LITERAL_EXPR = 130
    NULL_PTR_LITERAL_EXPR = 131
    THIS_EXPR = 132
    THROW_EXPR = 133
    NEW_EXPR = 134
    DELETE_EXPR = 135
    UNARY_EXPR = 136
    OBJC_STRING_LITERAL = 137
    OBJC_ENCODE_EXPR = 138
    OBJC_SELECTOR_EXPR = 139
    OBJC_PROTOCOL_EXPR = 140
    OBJC_BRIDGED_CAST_EXPR = 141
    PACK_EXPANSION_EXPR = 142
    SIZE_OF_PACK_EXPR = 143
    LAMBDA_EXPR = 144
    OBJC_BOOL_LITERAL_EXPR = 145
    OBJC_SELF_EXPR = 146
    UNEXPOSED_STMT = 200
    LABEL_STMT = 201
    COMPOUND_STMT = 202
    CASE_STMT = 203
    DEFAULT_STMT = 204
    IF_STMT = 205
    SWITCH_STMT = 206
    WHILE_STMT = 207
    DO_STMT = 208
    FOR_STMT = 209
    GOTO_STMT = 210
    INDIRECT_GOTO_STMT = 211
    CONTINUE_STMT = 212
    BREAK_STMT = 213
    RETURN_STMT = 214
    ASM_STMT = 215
    OBJC_AT_TRY_STMT = 216
    OBJC_AT_CATCH_STMT = 217
    OBJC_AT_FINALLY_STMT = 218
    OBJC_AT_THROW_STMT = 219
    OBJC_AT_SYNCHRONIZED_STMT = 220
    OBJC_AUTORELEASE_POOL_STMT = 221
    OBJC_FOR_COLLECTION_STMT = 222
    CXX_CATCH_STMT = 223
    CXX_TRY_STMT = 224
    CXX_FOR_RANGE_STMT = 225
    SEH_TRY_STMT = 226
    SEH_EXCEPT_STMT = 227
    SEH_FINALLY_STMT = 228
    MS_ASM_STMT = 229
    NULL_STMT = 230
    DECL_STMT = 231
    SEH_LEAVE_STMT = 247
    TRANSLATION_UNIT = 350
    UNEXPOSED_ATTR = 400
    IB_ACTION_ATTR = 401
    IB_OUTLET_ATTR = 402
    IB_OUTLET_COLLECTION_ATTR = 403
    CXX_FINAL_ATTR = 404
    CXX_OVERRIDE_ATTR = 405
    ANNOTATE_ATTR = 406
    ASM_LABEL_ATTR = 407
    PACKED_ATTR = 408
    PURE_ATTR = 409
    CONST_ATTR = 410
    NO_DUPLICATE_ATTR = 411
    CUDA_CONSTANT_ATTR = 412
    CUDA_DEVICE_ATTR = 413
    CUDA_GLOBAL_ATTR = 414
    CUDA_HOST_ATTR = 415
    CUDA_SHARED_ATTR = 416
    PREPROCESSING_DIRECTIVE = 500
    MACRO_DEFINITION = 501
    MACRO_EXPANSION = 502
    INCLUSION_DIRECTIVE = 503
    MODULE_IMPORT_DECL = 600
    OVERLOAD_CANDIDATE = 700

    @classmethod
    def _missing_(cls, value: object) -> "CursorKind | None":
        """Map kinds introduced by newer libclang releases to a placeholder.

        The pseudo-member keeps the raw value so round-tripping back to
        libclang (for the category predicates) still works.
        """
        if not isinstance(value, int):
            return None
        member = int.__new__(cls, value)
        member._name_ = f"UNKNOWN_{value}"
        member._value_ = value
        return member

    def is_declaration(self) -> bool:
        """Whether this kind is categorized as a declaration."""
        return self._categorize("clang_isDeclaration")

    def is_reference(self) -> bool:
        """Whether this kind is categorized as a reference."""
        return self._categorize("clang_isReference")

    def is_expression(self) -> bool:
        """Whether this kind is categorized as an expression."""
        return self._categorize("clang_isExpression")

    def is_statement(self) -> bool:
        """Whether this kind is categorized as a statement."""
        return self._categorize("clang_isStatement")

    def is_attribute(self) -> bool:
        """Whether this kind is categorized as an attribute."""
        return self._categorize("clang_isAttribute")

    def is_preprocessing(self) -> bool:
        """Whether this kind is categorized as preprocessing."""
        return self._categorize("clang_isPreprocessing")

    def is_unexposed(self) -> bool:
        """Whether this kind is categorized as unexposed."""
        return self._categorize("clang_isUnexposed")

    def _categorize(self, function_name: str) -> bool:
        """Call a stateless clang_is* predicate; needs the library, not a token."""
        from clangengine.core.library import get_library  # noqa: PLC0415 - circular

        return bool(getattr(get_library(), function_name)(int(self)))
