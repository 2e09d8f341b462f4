"""
Basic example of using Lambda Memory Bench.

This example benchmarks the 'basic' workload family of a deployed API and
prints the recommended memory configuration.
"""

import asyncio
from lambda_memory_bench import BenchmarkConfig, FamilyConfig, BenchmarkOrchestrator, ReportGenerator


async def main():
    """Run basic benchmark example."""

    # Create configuration
    config = BenchmarkConfig(
        base_url='https://abc123.execute-api.us-east-1.amazonaws.com/prod',
        families=[
            FamilyConfig(
                function_type='basic',
                memory_sizes=[128, 512, 1024],
                target_cold=3,
                target_warm=10
            )
        ],
        output_dir='./results/basic-example'
    )

    print(f"Starting benchmark against: {config.base_url}")
    print(f"Memory configurations to test: {config.families[0].memory_sizes}")

    # Create orchestrator and run the benchmark
    orchestrator = BenchmarkOrchestrator(config)
    results = await orchestrator.run_benchmark()

    # Generate report
    report_gen = ReportGenerator(results, config)

    print("\n=== BENCHMARK RESULTS ===")
    for row in report_gen.get_summary():
        if row['memory_mb'] is None:
            print(f"{row['family']}: no warm start data collected")
            continue
        print(f"{row['family']}: {row['memory_mb']}MB "
              f"(warm {row['warm_start_avg']:.2f}ms, blended ${row['blended_cost']:.4f} per 1M)")

    # Save reports
    paths = orchestrator.save_results(results)

    print("\nReports saved:")
    print(f"- {paths['data_file']}")
    print(f"- {paths['summary_file']}")


if __name__ == '__main__':
    # Run the example
    asyncio.run(main())
