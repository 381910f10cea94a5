"""Structure of a generated factory module, independent of its rendering."""

from pydantic import BaseModel, ConfigDict, Field

from contracts import TypeElement
from services.naming import ACCESSOR_NAME, factory_class_name, factory_module_name


class FactorySource(BaseModel):
    """Everything the factory template needs to render one module."""
    model_config = ConfigDict(frozen=True)

    package: str = Field(..., description="Package receiving the module (the contract's package)")
    module_name: str = Field(..., description="Module name, without package")
    class_name: str = Field(..., description="Factory class name")
    contract_module: str = Field(..., description="Module declaring the contract")
    contract_qualname: str = Field(..., description="Contract qualified name inside its module")
    accessor: str = Field(default=ACCESSOR_NAME)
    generator: str = Field(..., description="Name recorded in @generated")
    date: str = Field(..., description="Generation timestamp recorded in @generated")

    @classmethod
    def for_contract(cls, contract: TypeElement, generator: str, date: str) -> "FactorySource":
        return cls(
            package=contract.package_name,
            module_name=factory_module_name(contract.simple_name),
            class_name=factory_class_name(contract.simple_name),
            contract_module=contract.module,
            contract_qualname=contract.qualname,
            generator=generator,
            date=date,
        )

    @property
    def qualified_module(self) -> str:
        return f"{self.package}.{self.module_name}" if self.package else self.module_name

    @property
    def contract_import(self) -> str:
        """Top-level name imported from the contract's module."""
        return self.contract_qualname.split(".")[0]

    @property
    def contract_name(self) -> str:
        return f"{self.contract_module}.{self.contract_qualname}"
