from timecalc.cli import main

main(prog_name="timecalc")
