import argparse
import json
import os
import sys
from datetime import datetime

from rich.console import Console
from rich.markup import escape

from riskscope.config import apply_proxy_env, load_blacklist_file, load_config, scan_options
from riskscope.enrichment import ScanError, scan_url
from riskscope.exporter import export_data
from riskscope.input_handler import parse_targets, read_targets_file
from riskscope.logger import log_event, log_scan_history
from riskscope.risk_scoring import score_url_risk
from riskscope.utils import dedupe_targets, print_banner, print_breakdown, print_results_table

console = Console()


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        prog="riskscope",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        description="Heuristic risk scoring and hosting triage for suspicious domains and URLs.",
        epilog="""
                Examples:
                    riskscope http://secure-login.badactor.net
                    riskscope example.com paypa1-verify.com --scan
                    riskscope --targets-file urls.txt --export csv --log
                    riskscope --serve --port 8000
        """,
    )
    parser.add_argument("targets", nargs="*", help="Domains or URLs to score")
    parser.add_argument(
        "--config", type=str, default=None, help="Path to a JSON config file"
    )
    parser.add_argument(
        "--json", action="store_true", help="Output machine-readable JSON to stdout"
    )
    parser.add_argument(
        "--targets-file", type=str, default=None,
        help="Path to a file containing one target per line"
    )
    parser.add_argument(
        "--blacklist", nargs="+", default=None,
        help="Override the domain blacklist (exact hostnames)"
    )
    parser.add_argument(
        "--blacklist-file", type=str, default=None,
        help="File with one blacklisted hostname per line"
    )
    parser.add_argument(
        "-S", "--scan", action="store_true",
        help="Resolve each host and look up its IP geolocation"
    )
    parser.add_argument(
        "-x", "--export", choices=["csv", "json", "txt"], help="Export format for results"
    )
    parser.add_argument(
        "-o", "--output", default="results", help="Output file base name (no extension)"
    )
    parser.add_argument("-s", "--save-dir", type=str, default="exports",
                        help="Directory to save exported files (default: exports)")
    parser.add_argument(
        "--dedupe", action="store_true", help="Remove duplicate targets"
    )
    parser.add_argument(
        "--sort-score", action="store_true", help="Sort results by score, highest first"
    )
    parser.add_argument(
        "--request-timeout", type=float, default=None,
        help="HTTP/DNS timeout in seconds for --scan lookups"
    )
    parser.add_argument(
        "--insecure", action="store_true", help="Disable TLS verification for lookups"
    )
    parser.add_argument(
        "--proxy", type=str, default=None,
        help="Proxy URL for HTTP/HTTPS requests (e.g., http://127.0.0.1:8080)"
    )
    parser.add_argument(
        "--user-agent", type=str, default=None,
        help="Custom User-Agent for HTTP requests (overrides RISKSCOPE_USER_AGENT)"
    )
    parser.add_argument(
        "--serve", action="store_true", help="Run the HTTP scan API instead of scoring targets"
    )
    parser.add_argument("--host", default="127.0.0.1", help="Bind address for --serve")
    parser.add_argument("--port", type=int, default=8000, help="Port for --serve")
    parser.add_argument(
        "-g", "--log", action="store_true", help="Log scan history and events under logs/"
    )
    parser.add_argument("-n", "--no-banner", action="store_true", help="Suppress ASCII banner output")

    return parser.parse_args(argv), parser


def build_config(args):
    config = load_config(args.config)
    if args.json:
        config["json_output"] = True
    if args.request_timeout is not None:
        config["request_timeout"] = args.request_timeout
    if args.proxy:
        config["http_proxy"] = args.proxy
        config["https_proxy"] = args.proxy
    if args.insecure:
        config["verify_tls"] = False
    if args.user_agent:
        config["user_agent"] = args.user_agent
    if args.blacklist_file:
        config["domain_blacklist"] = load_blacklist_file(args.blacklist_file)
    if args.blacklist:
        config["domain_blacklist"] = [d.strip() for d in args.blacklist if d.strip()]

    apply_proxy_env(config)
    os.environ["RISKSCOPE_USER_AGENT"] = str(config.get("user_agent", "riskscope/1.0"))
    os.environ["RISKSCOPE_REQUEST_TIMEOUT"] = str(config.get("request_timeout", 10))
    os.environ["RISKSCOPE_VERIFY_TLS"] = "true" if config.get("verify_tls", True) else "false"
    if config.get("http_proxy"):
        os.environ["RISKSCOPE_HTTP_PROXY"] = config["http_proxy"]
    if config.get("https_proxy"):
        os.environ["RISKSCOPE_HTTPS_PROXY"] = config["https_proxy"]
    return config


def assess_target(target, config, scan=False):
    blacklist = config.get("domain_blacklist")
    entry = {"target": target}
    entry.update(score_url_risk(target, blacklist=blacklist).to_dict())

    if scan:
        try:
            scanned = scan_url(target, blacklist=blacklist, **scan_options(config))
        except ScanError as e:
            entry["error"] = e.message
        else:
            for key in ("ip", "country", "lat", "lon"):
                entry[key] = scanned[key]

    return entry


def serve(config, host, port):
    import uvicorn

    from riskscope.api_server import create_app

    uvicorn.run(create_app(config), host=host, port=port)


def main(argv=None):
    args, parser = parse_args(argv)

    try:
        config = build_config(args)
    except OSError as e:
        console.print(f"[bold red]Error:[/bold red] Failed to read blacklist file: {e}")
        sys.exit(1)

    json_mode = bool(config.get("json_output"))

    def output_json(payload):
        print(json.dumps(payload, ensure_ascii=False, indent=2))

    if args.serve:
        serve(config, args.host, args.port)
        return

    targets = []
    if args.targets_file:
        try:
            targets = read_targets_file(args.targets_file)
        except OSError as e:
            console.print(f"[bold red]Error:[/bold red] Failed to read targets file: {e}")
            sys.exit(1)
    targets.extend(parse_targets(args.targets))

    if not targets:
        if not json_mode:
            print_banner()
        parser.print_help()
        sys.exit(1)

    if args.dedupe:
        targets = dedupe_targets(targets)

    if not args.no_banner and not json_mode:
        print_banner()

    if args.log:
        log_event("scan_start", {"targets": targets, "scan": args.scan})

    results = []
    for target in targets:
        entry = assess_target(target, config, scan=args.scan)
        if entry.get("error") and not json_mode:
            console.print(f"[yellow]Lookup failed:[/yellow] {escape(target)} ({escape(entry['error'])})")
        results.append(entry)

    if args.sort_score:
        results = sorted(results, key=lambda r: r.get("score", 0), reverse=True)

    if json_mode:
        output_json({"results": results})
    else:
        print_results_table(results)
        for entry in results:
            print_breakdown(entry)

    if args.export:
        if args.output and args.output != "results":
            output_name = args.output
        else:
            timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
            output_name = f"riskscope_{timestamp}"
        export_data(results, fmt=args.export, output=output_name, save_dir=args.save_dir)

    if args.log:
        log_scan_history(results)
        log_event("scan_complete", {
            "targets": len(targets),
            "errors": sum(1 for r in results if r.get("error")),
        })

    if not json_mode:
        console.rule("[bold green]Done")


if __name__ == "__main__":
    main()
