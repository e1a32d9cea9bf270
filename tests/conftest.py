"""
Shared test fixtures for the flowlint test suite.
"""

import pytest

from flowlint.models import CodeFile, Flow, Project, StructDefinition, Variable

BILLING_SOURCE = """using System;

namespace Acme.Billing
{
    public class InvoiceTools
    {
        /// <summary>
        /// Adds tax to an amount.
        /// </summary>
        public static double AddTax(double amount, int percent = 20)
        {
            return amount * (100 + percent) / 100;
        }

        // Greets a customer by name
        [Obsolete]
        public string Greet(string name, Customer customer)
        {
            return "Hello " + name;
        }
    }
}
"""


@pytest.fixture
def billing_source():
    """C# source with two documented public methods."""
    return BILLING_SOURCE


@pytest.fixture
def billing_file():
    return CodeFile(id="cf-billing", name="Billing.cs", source_text=BILLING_SOURCE)


@pytest.fixture
def structs():
    """Customer -> Address struct graph, plus a self-referencing Link struct."""
    return [
        StructDefinition(
            id="s-customer",
            name="Customer",
            fields=[
                {"name": "name", "type": "string"},
                {"name": "address", "type": "Address"},
                {"name": "orders", "type": "number", "isArray": True},
            ],
        ),
        StructDefinition(
            id="s-address",
            name="Address",
            fields=[{"name": "city", "type": "string"}, {"name": "zip", "type": "string"}],
        ),
        StructDefinition(id="s-link", name="Link", fields=[{"name": "next", "type": "Link"}]),
    ]


@pytest.fixture
def variables():
    """Flow-local variables covering each primitive type."""
    return [
        Variable(name="total", type="number", value="0"),
        Variable(name="count", type="integer"),
        Variable(name="title", type="string", value="Invoice"),
        Variable(name="approved", type="boolean"),
        Variable(name="customer", type="Customer"),
        Variable(name="tags", type="string", is_array=True),
    ]


@pytest.fixture
def sample_project(billing_file, structs, variables):
    """A project with one main flow and one sub-flow it calls."""
    main_flow = Flow.model_validate(
        {
            "id": "flow-main",
            "name": "Main",
            "variables": [v.model_dump(by_alias=True) for v in variables],
            "nodes": [
                {"id": "n-start", "type": "start", "data": {"label": "Start"}},
                {
                    "id": "n-check",
                    "type": "decision",
                    "data": {"label": "Approved?", "condition": "{approved} == true"},
                },
                {
                    "id": "n-tax",
                    "type": "functionCall",
                    "data": {
                        "label": "Add tax",
                        "codeFileId": "cf-billing",
                        "functionName": "AddTax",
                        "arguments": {"amount": "{total}"},
                    },
                },
                {"id": "n-sub", "type": "subFlow", "data": {"subFlowId": "flow-notify"}},
                {"id": "n-end", "type": "end"},
            ],
        }
    )
    notify_flow = Flow(
        id="flow-notify",
        name="Notify",
        nodes=[{"id": "n-log", "kind": "log", "message": "Sending {title} to {region}"}],
    )
    return Project(
        flows=[main_flow, notify_flow],
        code_files=[billing_file],
        global_variables=[Variable(name="region", type="string", is_global=True)],
        structs=structs,
    )
