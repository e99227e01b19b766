"""
Per-construct decision procedures for banned API usage.

Each ``match_*`` method inspects one typed node and returns at most one
``Diagnostic``. Within a procedure the checks run in a fixed order and the
first applicable one wins.
"""

import logging
from typing import Optional

from ..models import Diagnostic, Severity
from ..nodes import CallNode, ImportNode, MethodNode, NewClassNode, NodeKind, VariableNode
from ..registry.models import BanRegistry
from .messages import constructor_message, method_call_message, standard_message
from .suppression import SuppressionIndex
from .type_keys import normalize_type

logger = logging.getLogger(__name__)

# Rule identifiers reported on each diagnostic
RULE_RECEIVER_CLASS = "call-receiver-class"
RULE_METHOD_PACKAGE = "call-method-package"
RULE_BANNED_METHOD = "call-banned-method"
RULE_RESULT_CLASS = "call-result-class"
RULE_RESULT_PACKAGE = "call-result-package"
RULE_ARGUMENT_CLASS = "call-argument-class"
RULE_ARGUMENT_PACKAGE = "call-argument-package"
RULE_CONSTRUCTED_CLASS = "new-constructed-class"
RULE_CONSTRUCTOR_PACKAGE = "new-constructor-package"
RULE_PARAMETER_CLASS = "new-parameter-class"
RULE_PARAMETER_PACKAGE = "new-parameter-package"
RULE_IMPORT_CLASS = "import-class"
RULE_IMPORT_PACKAGE = "import-package"
RULE_VARIABLE_CLASS = "variable-class"
RULE_VARIABLE_PACKAGE = "variable-package"
RULE_RETURN_CLASS = "method-return-class"
RULE_RETURN_PACKAGE = "method-return-package"


class BanMatcher:
    """
    Decides whether a typed node uses a banned class, package or method.

    The matcher holds only the immutable registry and suppression index, so
    one instance may be shared across threads.
    """

    def __init__(self, registry: BanRegistry, suppression_index: Optional[SuppressionIndex] = None):
        self.registry = registry
        self.suppression_index = suppression_index or SuppressionIndex()
        self._handlers = {
            NodeKind.CALL: self.match_call,
            NodeKind.NEW_CLASS: self.match_new_class,
            NodeKind.IMPORT: self.match_import,
            NodeKind.VARIABLE: self.match_variable,
            NodeKind.METHOD: self.match_method,
        }

    def match(self, node) -> Optional[Diagnostic]:
        """Dispatch to the procedure for the node's kind."""
        handler = self._handlers.get(getattr(node, 'kind', None))
        if handler is None:
            raise TypeError(f"Unsupported node type: {type(node).__name__}")
        return handler(node)

    def match_call(self, node: CallNode) -> Optional[Diagnostic]:
        """
        Check a method invocation.

        Order: banned receiver class, banned package of the invoked method,
        banned (receiver, method) pair, banned result class, banned result
        package prefix, then each argument's class and package.
        """
        if self.suppression_index.is_suppressed(node):
            return None

        method = node.method
        if method is None:
            return None

        registry = self.registry
        receiver_key = normalize_type(node.receiver_type)

        reason = registry.class_ban(receiver_key)
        if reason is not None:
            return self._report(node, standard_message(receiver_key, reason), RULE_RECEIVER_CLASS)

        if method.package is not None:
            reason = registry.package_ban(method.package)
            if reason is not None:
                return self._report(node, standard_message(method.package, reason), RULE_METHOD_PACKAGE)

        reason = registry.method_ban(receiver_key, method.name)
        if reason is not None:
            return self._report(node, method_call_message(f"{method.name}()", receiver_key, reason),
                                RULE_BANNED_METHOD)

        result_key = normalize_type(node.result_type)
        reason = registry.class_ban(result_key)
        if reason is not None:
            return self._report(node, method_call_message(method.display(), result_key, reason),
                                RULE_RESULT_CLASS)

        prefix_match = registry.package_prefix_match(result_key)
        if prefix_match is not None:
            prefix, reason = prefix_match
            return self._report(node, method_call_message(method.display(), prefix, reason),
                                RULE_RESULT_PACKAGE)

        for argument in node.arguments:
            # Arguments without a symbol (literals, unresolved expressions) are skipped
            if argument.symbol is None:
                continue

            reason = registry.class_ban(normalize_type(argument.type))
            if reason is not None:
                return self._report(node, standard_message(method.display(), reason), RULE_ARGUMENT_CLASS)

            package = argument.symbol.package
            if package is not None:
                reason = registry.package_ban(package)
                if reason is not None:
                    return self._report(node, standard_message(method.display(), reason),
                                        RULE_ARGUMENT_PACKAGE)

        return None

    def match_new_class(self, node: NewClassNode) -> Optional[Diagnostic]:
        """
        Check an object construction.

        Order: banned constructed class, banned package of the constructor,
        then each declared parameter's class and package.
        """
        if self.suppression_index.is_suppressed(node):
            return None

        constructor = node.constructor
        if constructor is None:
            return None

        registry = self.registry
        constructed_key = normalize_type(node.constructed_type)

        reason = registry.class_ban(constructed_key)
        if reason is not None:
            return self._report(node, standard_message(constructed_key, reason), RULE_CONSTRUCTED_CLASS)

        if constructor.package is not None:
            reason = registry.package_ban(constructor.package)
            if reason is not None:
                return self._report(node, standard_message(constructor.package, reason),
                                    RULE_CONSTRUCTOR_PACKAGE)

        for parameter in node.parameters:
            parameter_key = normalize_type(parameter.type)
            reason = registry.class_ban(parameter_key)
            if reason is not None:
                return self._report(node, constructor_message(constructor.display(), parameter_key, reason),
                                    RULE_PARAMETER_CLASS)

            if parameter.package is not None:
                reason = registry.package_ban(parameter.package)
                if reason is not None:
                    return self._report(
                        node, constructor_message(constructor.display(), parameter.package, reason),
                        RULE_PARAMETER_PACKAGE)

        return None

    def match_import(self, node: ImportNode) -> Optional[Diagnostic]:
        if self.suppression_index.is_suppressed(node):
            return None

        reason = self.registry.class_ban(node.qualified_name)
        if reason is not None:
            return self._report(node, standard_message(node.qualified_name, reason), RULE_IMPORT_CLASS)

        if node.package is not None:
            reason = self.registry.package_ban(node.package)
            if reason is not None:
                return self._report(node, standard_message(node.package, reason), RULE_IMPORT_PACKAGE)

        return None

    def match_variable(self, node: VariableNode) -> Optional[Diagnostic]:
        if self.suppression_index.is_suppressed(node):
            return None

        return self._match_declared_type(node, node.declared_type, RULE_VARIABLE_CLASS, RULE_VARIABLE_PACKAGE)

    def match_method(self, node: MethodNode) -> Optional[Diagnostic]:
        if self.suppression_index.is_suppressed(node):
            return None

        if not node.resolved:
            return None

        return self._match_declared_type(node, node.return_type, RULE_RETURN_CLASS, RULE_RETURN_PACKAGE)

    def _match_declared_type(self, node, type_ref: Optional[str], class_rule: str,
                             package_rule: str) -> Optional[Diagnostic]:
        key = normalize_type(type_ref)

        reason = self.registry.class_ban(key)
        if reason is not None:
            return self._report(node, standard_message(key, reason), class_rule)

        prefix_match = self.registry.package_prefix_match(key)
        if prefix_match is not None:
            prefix, reason = prefix_match
            return self._report(node, standard_message(prefix, reason), package_rule)

        return None

    def _report(self, node, message: str, rule: str) -> Diagnostic:
        logger.debug(f"{node.location}: {rule}: {message}")
        return Diagnostic(
            location=node.location,
            message=message,
            severity=Severity.ERROR,
            node_kind=node.kind.value,
            rule=rule,
        )
