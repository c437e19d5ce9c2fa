from fraud_imbalance.pipeline import PipelineRunner
from fraud_imbalance.reporting import ReportRenderer


def main() -> None:
    """Run the full resampling x classifier comparison and render the report."""
    runner = PipelineRunner("config/default.yaml")
    report = runner.run()

    output = runner.config.output
    if output.get("render", True):
        ReportRenderer(output["figures_dir"], output["metrics_path"]).render(report)


if __name__ == "__main__":
    main()
