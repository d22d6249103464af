import argparse
import logging
import sys

from circuitsteps.examples import EXAMPLES
from circuitsteps.interfaces import solve
from circuitsteps.mna import MnaSystem
from circuitsteps.operations import matrix_to_latex
from circuitsteps.parser import load_container_from_json
from circuitsteps.solver import serialize_steps
from circuitsteps.validation import StatusError


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="circuitsteps: Explainable Modified Nodal Analysis")
    parser.add_argument("json_file", nargs="?", help="Path to the JSON file defining the circuit elements.")
    parser.add_argument("--example", choices=sorted(EXAMPLES), help="Solve one of the built-in example circuits.")
    parser.add_argument("--step", action="store_true", help="Reduce the circuit step by step instead of showing the MNA matrices.")
    parser.add_argument("--mesh", action="store_true", help="Solve over meshes instead of nodes (not implemented).")
    parser.add_argument("--json", action="store_true", help="Print the steps as JSON.")
    parser.add_argument("--latex", action="store_true", help="Also print A, Z and X as LaTeX.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Show topology and assembly details.")
    return parser


def main(argv: list[str] | None = None) -> int:
    arg_parser = build_arg_parser()
    args = arg_parser.parse_args(argv)
    if (args.json_file is None) == (args.example is None):
        arg_parser.error("give exactly one of json_file or --example")
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING,
                        format="%(levelname)s %(name)s: %(message)s")

    try:
        if args.example:
            container = EXAMPLES[args.example]()
        else:
            container = load_container_from_json(args.json_file)
    except FileNotFoundError as e:
        print(f"Error loading circuit: {e}")
        return 1
    except ValueError as e:
        print(f"Error loading or validating circuit: {e}")
        return 1

    try:
        steps = solve(container, matrix=not args.step, nodal=not args.mesh)
    except NotImplementedError as e:
        print(f"Solver Error: {e}")
        return 2
    except (StatusError, ValueError) as e:
        print(f"Error: {e}")
        return 1

    if args.json:
        print(serialize_steps(steps))
    else:
        print(f"Elements: {len(container.get_elements())}")
        for node in container.nodes():
            print(f"  {node.pretty_string()}")
        for super_node in container.super_nodes():
            if len(super_node.node_ids) > 1:
                print(f"  {super_node.pretty_string()}")
        for number, step in enumerate(steps, start=1):
            print(f"\n{number}. {step.label}")
            for op in step.sub_steps:
                print(f"    {op.equation_repr()}")

    if args.latex and not args.step:
        system = MnaSystem.assemble(container.topology())
        print("\n--- LaTeX ---")
        print(f"A = {matrix_to_latex(system.a)}")
        print(f"Z = {matrix_to_latex(system.z)}")
        print(f"X = {matrix_to_latex(system.x)}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
