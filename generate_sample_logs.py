"""
Generate a sample log file mixing sshd auth lines and web access lines,
including every threat category the analyzer detects
"""

import argparse
import datetime
import os
import random

# Sample data pools
normal_ips = [f"192.168.1.{i}" for i in range(1, 60)]

# "Attacker" IPs appear more often and drive the brute force findings
attacker_ips = [
    "185.220.101.45", "45.33.32.156", "103.21.244.15",
    "91.240.118.172", "194.26.29.120",
]

users = ["root", "admin", "ubuntu", "deploy", "test", "oracle"]

methods = ["GET", "POST", "PUT", "DELETE"]
method_weights = [70, 20, 5, 5]

normal_endpoints = [
    "/", "/index.html", "/home", "/about", "/contact",
    "/api/users", "/api/login", "/api/data", "/products",
    "/images/logo.png", "/css/style.css", "/js/app.js",
]

# Attack endpoints, one group per detector
attack_endpoints = [
    # Sensitive paths
    "/admin", "/admin/config.php", "/wp-login.php",
    # SQL injection
    "/search?q=' OR '1'='1",
    "/api/users?id=1 UNION SELECT username,password FROM users",
    "/items?id=1;SELECT sleep(5)",
    # XSS
    "/search?q=<script>alert(1)</script>",
    "/comment?text=<img src=x onerror=alert(document.cookie)>",
    # Directory traversal
    "/download?file=../../../etc/passwd",
    "/static/..\\..\\c:\\windows\\system32\\cmd.exe",
]

user_agents = [
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 (KHTML, like Gecko) Safari/537.36",
    "curl/7.88.1",
    "python-requests/2.31.0",
]

scanner_agents = [
    "sqlmap/1.7.2#stable (https://sqlmap.org)",
    "Nikto/2.1.6",
    "Mozilla/5.00 (Nikto/2.1.6) (Evasions:None) (Test:000001)",
    "Nmap Scripting Engine",
    "Acunetix-WVS",
]

referrers = ["-", "https://www.google.com/", "https://example.com/"]

status_codes = [200, 301, 302, 401, 403, 404, 500]
status_weights = [70, 3, 3, 6, 6, 10, 2]


def _ssh_line(rng, ts, attacker_rate):
    host = "web01"
    pid = rng.randint(1000, 65000)
    syslog_ts = ts.strftime("%b %d %H:%M:%S")
    user = rng.choice(users)
    if rng.random() < attacker_rate:
        ip = rng.choice(attacker_ips)
        return f"{syslog_ts} {host} sshd[{pid}]: Failed password for {user} from {ip} port {rng.randint(1024, 65535)} ssh2"
    ip = rng.choice(normal_ips)
    return f"{syslog_ts} {host} sshd[{pid}]: Accepted password for {user} from {ip} port {rng.randint(1024, 65535)} ssh2"


def _access_line(rng, ts, attack_rate):
    formatted_time = ts.strftime("%d/%b/%Y:%H:%M:%S +0000")
    method = rng.choices(methods, weights=method_weights)[0]
    status = rng.choices(status_codes, weights=status_weights)[0]
    size = rng.randint(100, 50000)
    referrer = rng.choice(referrers)

    if rng.random() < attack_rate:
        ip = rng.choice(attacker_ips)
        endpoint = rng.choice(attack_endpoints)
        user_agent = rng.choice(scanner_agents + user_agents)
    else:
        ip = rng.choice(normal_ips)
        endpoint = rng.choice(normal_endpoints)
        user_agent = rng.choice(user_agents)

    # Apache/Nginx combined log format
    return f'{ip} - - [{formatted_time}] "{method} {endpoint} HTTP/1.1" {status} {size} "{referrer}" "{user_agent}"'


def generate_lines(total_rows, seed=None, attack_rate=0.15, ssh_share=0.3):
    """Return ``total_rows`` synthetic log lines in timestamp order"""
    rng = random.Random(seed)
    start_date = datetime.datetime(2025, 12, 1, 0, 0, 0)

    timestamps = sorted(
        start_date + datetime.timedelta(seconds=rng.randint(0, 25 * 24 * 3600))
        for _ in range(total_rows)
    )

    lines = []
    for ts in timestamps:
        if rng.random() < ssh_share:
            lines.append(_ssh_line(rng, ts, attacker_rate=attack_rate * 3))
        else:
            lines.append(_access_line(rng, ts, attack_rate))
    return lines


def write_sample_log(output_file, total_rows, seed=None):
    with open(output_file, 'w', encoding='utf-8') as f:
        for i, line in enumerate(generate_lines(total_rows, seed=seed)):
            # Progress indicator
            if i and i % 100000 == 0:
                print(f"Written {i:,} / {total_rows:,} rows...")
            f.write(line + "\n")
    return output_file


def main(argv=None):
    parser = argparse.ArgumentParser(description="Generate a sample log file for the threat analyzer.")
    parser.add_argument("-o", "--output", default="sample_security.log", help="Output file")
    parser.add_argument("-n", "--rows", type=int, default=5000, help="Number of log lines")
    parser.add_argument("--seed", type=int, default=None, help="Random seed for repeatable output")
    args = parser.parse_args(argv)

    print(f"Generating {args.rows:,} sample log entries...")
    write_sample_log(args.output, args.rows, seed=args.seed)

    print(f"\n✅ Done! Generated {args.rows:,} log entries")
    print(f"📁 File saved: {args.output}")
    print(f"📊 File size: {os.path.getsize(args.output) / 1024:.2f} KB")


if __name__ == '__main__':
    main()
