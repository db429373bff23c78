"""In-process contract execution for delegated signature verification.

EIP-1271 verification calls out to a contract. The ``VerificationBackend``
protocol is all the verifier needs from the outside world: a code check and a
read-only call. ``ContractRegistry`` implements it for contracts written in
Python, enforcing static call semantics: while a static call is in progress
every storage write is rejected, and the call fails even if the contract
catches the rejection and carries on. Changes that bypass the storage mapping,
such as mutating a stored list in place or rebinding an instance attribute,
are found by comparing contract state before and after the call.
"""

import copy
import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Iterator, MutableMapping, Optional, Protocol

from eth_utils import keccak, to_checksum_address

from ..utils import address_bytes

logger = logging.getLogger(__name__)

# Attributes managed by the registry rather than by the contract itself
_REGISTRY_ATTRIBUTES = frozenset(["address", "registry", "storage"])


class ContractRevert(Exception):
    """A contract call reverted."""


class StaticCallViolation(ContractRevert):
    """A contract tried to modify state during a static call."""


class VerificationBackend(Protocol):
    """Execution environment for delegated verification calls."""

    def is_contract(self, address: str) -> bool:
        """Whether code is deployed at ``address``."""
        ...

    def static_call(self, address: str, data: bytes) -> bytes:
        """Call ``address`` without allowing state modifications.

        Returns:
            Raw return data

        Raises:
            ContractRevert: If the call reverted or attempted to modify state
        """
        ...


class ContractStorage(MutableMapping):
    """Storage of a single contract.

    Writes go through the owning registry, which refuses them inside a
    static call.
    """

    def __init__(self, contract: "Contract"):
        self._contract = contract
        self._slots: Dict[Any, Any] = {}

    def __getitem__(self, key: Any) -> Any:
        return self._slots[key]

    def __setitem__(self, key: Any, value: Any) -> None:
        self._check_writable()
        self._slots[key] = value

    def __delitem__(self, key: Any) -> None:
        self._check_writable()
        del self._slots[key]

    def __iter__(self) -> Iterator[Any]:
        return iter(self._slots)

    def __len__(self) -> int:
        return len(self._slots)

    def _check_writable(self) -> None:
        registry = self._contract.registry
        if registry is not None:
            registry.check_state_write(self._contract)


class Contract(ABC):
    """A contract that can be deployed into a ``ContractRegistry``.

    Contract state is ``storage`` plus any other instance attributes. State
    values must be plain data (numbers, bytes, strings, containers of them)
    so that a copy taken before a static call compares equal when unchanged.
    """

    def __init__(self) -> None:
        self.address: Optional[str] = None
        self.registry: Optional["ContractRegistry"] = None
        self.storage = ContractStorage(self)

    @abstractmethod
    def handle_call(self, data: bytes) -> bytes:
        """Execute a call with ABI encoded ``data`` and return ABI encoded output.

        Raises:
            ContractRevert: To revert the call
        """


def _contract_state(contract: Contract) -> Any:
    attributes = {
        name: value for name, value in vars(contract).items() if name not in _REGISTRY_ATTRIBUTES
    }
    return copy.deepcopy((contract.storage._slots, attributes))


class ContractRegistry:
    """Maps addresses to deployed ``Contract`` instances and executes calls.

    Example:
        ```python
        registry = ContractRegistry()
        address = registry.deploy(MyVerifier())
        owner = recover_order_signer(digest, SigningScheme.EIP1271, payload, backend=registry)
        ```
    """

    def __init__(self) -> None:
        self._contracts: Dict[bytes, Contract] = {}
        self._nonce = 0
        self._static_depth = 0
        self._violations = 0

    def deploy(self, contract: Contract, address: Optional[str] = None) -> str:
        """Deploy a contract and return its checksum address.

        Raises:
            ValueError: If the contract is already deployed or the address is taken
        """
        if contract.registry is not None:
            raise ValueError(f"Contract already deployed at {contract.address}")

        if address is None:
            key = keccak(b"order-signing-registry" + self._nonce.to_bytes(32, "big"))[12:]
            self._nonce += 1
        else:
            key = address_bytes(address)
        if key in self._contracts:
            raise ValueError(f"Invalid address: {to_checksum_address(key)} already in use")

        contract.address = to_checksum_address(key)
        contract.registry = self
        self._contracts[key] = contract
        logger.debug("Deployed %s at %s", type(contract).__name__, contract.address)
        return contract.address

    def is_contract(self, address: str) -> bool:
        return address_bytes(address) in self._contracts

    @property
    def is_static(self) -> bool:
        """Whether a static call is currently executing."""
        return self._static_depth > 0

    def call(self, address: str, data: bytes) -> bytes:
        """Call a contract, allowing it to modify its state.

        Calls to addresses without code succeed with empty return data.
        """
        contract = self._contracts.get(address_bytes(address))
        if contract is None:
            return b""
        return contract.handle_call(data)

    def static_call(self, address: str, data: bytes) -> bytes:
        """Call a contract in a read-only context.

        Any state change made during the call is rolled back.

        Raises:
            ContractRevert: If the contract reverted
            StaticCallViolation: If the contract attempted any state write,
                including writes whose rejection it caught itself and
                in-place changes to stored values or attributes
        """
        snapshot = None if self.is_static else self._snapshot()
        violations = self._violations
        self._static_depth += 1
        try:
            result = self.call(address, data)
        except Exception:
            if snapshot is not None:
                self._restore(snapshot)
            raise
        finally:
            self._static_depth -= 1

        modified = self._violations != violations
        if snapshot is not None and self._snapshot() != snapshot:
            self._violations += 1
            modified = True
            logger.warning("Rolling back state modified during static call to %s", address)
        if modified:
            if snapshot is not None:
                self._restore(snapshot)
            raise StaticCallViolation(f"state modification during static call to {address}")
        return result

    def _snapshot(self) -> Dict[bytes, Any]:
        return {key: _contract_state(contract) for key, contract in self._contracts.items()}

    def _restore(self, snapshot: Dict[bytes, Any]) -> None:
        for key, (slots, attributes) in snapshot.items():
            contract = self._contracts[key]
            contract.storage._slots = slots
            for name in [name for name in vars(contract) if name not in _REGISTRY_ATTRIBUTES]:
                delattr(contract, name)
            for name, value in attributes.items():
                setattr(contract, name, value)

    def check_state_write(self, contract: Contract) -> None:
        """Reject a storage write by ``contract`` if a static call is executing.

        Raises:
            StaticCallViolation: Inside a static call
        """
        if self.is_static:
            self._violations += 1
            logger.warning("Rejected state write by %s during static call", contract.address)
            raise StaticCallViolation(f"state modification by {contract.address}")
