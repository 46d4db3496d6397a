from codex_docs.docs.base import AbstractDoc
from codex_docs.docs.file import FileDoc, MemoryDoc, TestFileDoc
from codex_docs.docs.members import ClassMemberDoc, ClassMethodDoc, ClassPropertyDoc
from codex_docs.docs.mocha import TestDoc
from codex_docs.docs.module import ModuleAssignmentDoc, ModuleClassDoc, ModuleFunctionDoc, ModuleVariableDoc
from codex_docs.docs.virtual import VirtualExternalDoc, VirtualTypedefDoc
from codex_docs.models import DocCategory

DOC_BUILDERS: dict[DocCategory, type[AbstractDoc]] = {
    DocCategory.MODULE_CLASS: ModuleClassDoc,
    DocCategory.MODULE_FUNCTION: ModuleFunctionDoc,
    DocCategory.MODULE_VARIABLE: ModuleVariableDoc,
    DocCategory.MODULE_ASSIGNMENT: ModuleAssignmentDoc,
    DocCategory.CLASS_METHOD: ClassMethodDoc,
    DocCategory.CLASS_MEMBER: ClassMemberDoc,
    DocCategory.CLASS_PROPERTY: ClassPropertyDoc,
    DocCategory.VIRTUAL_TYPEDEF: VirtualTypedefDoc,
    DocCategory.VIRTUAL_EXTERNAL: VirtualExternalDoc,
}

__all__ = [
    "DOC_BUILDERS",
    "AbstractDoc",
    "ClassMemberDoc",
    "ClassMethodDoc",
    "ClassPropertyDoc",
    "FileDoc",
    "MemoryDoc",
    "ModuleAssignmentDoc",
    "ModuleClassDoc",
    "ModuleFunctionDoc",
    "ModuleVariableDoc",
    "TestDoc",
    "TestFileDoc",
    "VirtualExternalDoc",
    "VirtualTypedefDoc",
]
