import csv
import json

from pearch.reporting import csv_reporter, json_reporter


def test_csv_report(scanner, sample_files, tmp_path):
    results = scanner.scan_batch([str(sample_files[k]) for k in ('x64', 'text', 'broken')])
    results += scanner.scan_batch([str(tmp_path / 'missing.exe')])
    out = tmp_path / 'report.csv'
    csv_reporter.generate(results, str(out))

    with open(out, encoding='utf-8', newline='') as f:
        rows = list(csv.DictReader(f))
    assert [r['status'] for r in rows] == ['recognized', 'not_recognized', 'invalid', 'error']
    assert rows[0]['architecture'] == 'x64 (64-bit)'
    assert rows[0]['machine_type'] == '0x8664'
    assert rows[0]['sha256'] == results[0].file_hash['sha256']
    assert rows[1]['architecture'] == '' and rows[1]['reason'] == ''
    assert rows[2]['reason'] == 'PE signature mismatch'
    assert 'Fisierul nu exista' in rows[3]['errors']


def test_json_report(scanner, sample_files, tmp_path):
    results = scanner.scan_batch([str(sample_files['x86']), str(sample_files['text'])])
    out = tmp_path / 'report.json'
    json_reporter.generate(results, str(out))
    data = json.loads(out.read_text(encoding='utf-8'))
    assert [d['status'] for d in data] == ['recognized', 'not_recognized']
    assert data[0]['detection']['architecture'] == 'x86 (32-bit)'

    json_reporter.generate(results[0], str(out))
    assert json.loads(out.read_text(encoding='utf-8'))['detection']['machine_type'] == 0x014C
